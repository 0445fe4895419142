"""Tests for hand history packaging and decision metrics."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from holdem_sim.core.betting_engine import BettingEngine
from holdem_sim.core.game_state import BetAction, PlayerState
from holdem_sim.core.odds_calculator import OddsCalculator
from holdem_sim.interface.hand_history import (
    CoachAnalysis,
    CoachProtocol,
    Grade,
    HandHistory,
    build_hand_history,
    decision_metrics,
    format_hand_history,
)
from holdem_sim.utils.card import Card, Deck, create_deck
from holdem_sim.utils.constants import ActionType, Seat, Street


def _cards(s: str) -> list[Card]:
    """Parse space-separated card strings: 'Ah Kh' -> [Card, Card]."""
    return [Card.from_str(c) for c in s.split()]


def _play_hand() -> HandHistory:
    """Hero raises AKs, the big blind calls and bets the turn, hero calls down."""
    top = _cards("Ah Kh 2c 7d 9s 4d Qc 3c Qh Jh 5s 8c 2d")
    rest = [c for c in create_deck() if c not in top]
    players = [PlayerState(seat=seat, stack=100.0) for seat in Seat]
    engine = BettingEngine(players, 0.5, 1.0, deck_factory=lambda: Deck(cards=top + rest))

    engine.start_hand()
    for action in (
        BetAction.fold(),           # opponent3
        BetAction.raise_to(3),      # hero
        BetAction.fold(),           # opponent1 (small blind)
        BetAction.call(),           # opponent2 (big blind)
        BetAction.check(),          # flop
        BetAction.raise_to(4),      # turn bet
        BetAction.call(),           # hero
        BetAction.check(),          # river
    ):
        engine.apply_action(action)

    outcome = engine.resolve_hand()
    return build_hand_history(engine.state, outcome)


class TestBuildHandHistory:
    def test_fields(self) -> None:
        history = _play_hand()
        assert history.hero_cards == tuple(_cards("Ah Kh"))
        assert history.community_cards == tuple(_cards("Qh Jh 5s 8c 2d"))
        assert history.pot == 14.5
        assert history.winners == (Seat.HERO,)
        assert history.hero_won
        assert len(history.winning_cards) == 5
        assert history.small_blind_seat == Seat.OPPONENT1
        assert history.big_blind_seat == Seat.OPPONENT2

    def test_stacks_after_hand(self) -> None:
        history = _play_hand()
        assert history.player_stacks == {
            Seat.HERO: 107.5,
            Seat.OPPONENT1: 99.5,
            Seat.OPPONENT2: 93.0,
            Seat.OPPONENT3: 100.0,
        }

    def test_hero_actions(self) -> None:
        history = _play_hand()
        assert [a.action for a in history.hero_actions] == [ActionType.RAISE, ActionType.CALL]
        assert len(history.actions) == 8

    def test_format(self) -> None:
        text = format_hand_history(_play_hand())
        assert "Hero (hero): Ah Kh" in text
        assert "Pot 14.5 to hero" in text


class TestDecisionMetrics:
    def test_one_entry_per_hero_decision(self) -> None:
        metrics = decision_metrics(_play_hand(), iterations=200, seed=1)
        assert [m.street for m in metrics] == [Street.PREFLOP, Street.TURN]

    def test_preflop_price(self) -> None:
        preflop = decision_metrics(_play_hand(), iterations=200, seed=1)[0]
        assert preflop.pot == 1.5
        assert preflop.call_amount == 1.0
        assert preflop.pot_odds == 40.0
        assert preflop.hit_probability == 0.0

    def test_turn_call(self) -> None:
        turn = decision_metrics(_play_hand(), iterations=200, seed=1)[1]
        assert turn.pot == 10.5
        assert turn.call_amount == 4.0
        assert turn.pot_odds == 27.6
        assert turn.outs >= 9
        assert turn.hit_probability == min(turn.outs * 2, 100)
        assert turn.expected_value == pytest.approx(turn.equity / 100 * 14.5 - 4, abs=0.01)

    def test_ev_follows_equity_estimate(self) -> None:
        with patch.object(OddsCalculator, "equity", return_value=50.0) as mock_equity:
            metrics = decision_metrics(_play_hand(), num_opponents=2, iterations=10, seed=3)
        assert mock_equity.call_count == 2
        assert mock_equity.call_args_list[0].args[2:] == (2, 10, 3)
        assert [m.expected_value for m in metrics] == [0.25, 3.25]
        assert all(m.is_profitable_call for m in metrics)

    def test_short_blind_replays_what_was_posted(self) -> None:
        top = _cards("Ah Kh 2c 7d 9s 4d Qc 3c Qh Jh 5s 8c 2d")
        rest = [c for c in create_deck() if c not in top]
        players = [PlayerState(seat=seat, stack=100.0) for seat in Seat]
        players[1].stack = 0.2
        engine = BettingEngine(players, 0.5, 1.0, deck_factory=lambda: Deck(cards=top + rest))

        engine.start_hand()
        for action in (
            BetAction.fold(),           # opponent3
            BetAction.raise_to(3),      # hero; the small blind is all-in
            BetAction.call(),           # opponent2
            BetAction.check(),
            BetAction.check(),
            BetAction.check(),
        ):
            engine.apply_action(action)
        history = build_hand_history(engine.state, engine.resolve_hand())

        assert history.posted_blinds == {Seat.OPPONENT1: 0.2, Seat.OPPONENT2: 1.0}
        preflop = decision_metrics(history, iterations=100, seed=1)[0]
        assert preflop.pot == pytest.approx(1.2)
        assert preflop.call_amount == 1.0

    def test_no_hole_cards(self) -> None:
        history = HandHistory(
            hero_cards=(),
            community_cards=(),
            actions=(),
            pot=0,
            player_stacks={},
            winners=(Seat.OPPONENT1,),
        )
        assert decision_metrics(history) == []


class _FakeCoach:
    async def analyze_hand(self, history: HandHistory) -> CoachAnalysis:
        grade = Grade.A if history.hero_won else Grade.C
        return CoachAnalysis(grade=grade, overall_feedback="ok")

    async def get_hand_summary(self, history: HandHistory) -> str:
        return f"Hand #{history.hand_number}"


class TestCoachProtocol:
    def test_structural_match(self) -> None:
        assert isinstance(_FakeCoach(), CoachProtocol)
        assert not isinstance(object(), CoachProtocol)

    def test_coach_receives_history(self) -> None:
        analysis = asyncio.run(_FakeCoach().analyze_hand(_play_hand()))
        assert analysis.grade == Grade.A
