"""Hand history records and the boundary to a coaching service.

A finished hand is packaged as a HandHistory. Anything that reviews
hands (an LLM coach, a batch analyzer) implements CoachProtocol and
receives only that record. ``decision_metrics`` replays the record and
computes the numbers a coach reasons about for each hero decision:
pot odds, equity, outs and the EV of calling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable

from holdem_sim.core.betting_engine import HandOutcome
from holdem_sim.core.game_state import ActionRecord, GameState
from holdem_sim.core.odds_calculator import DEFAULT_ITERATIONS, OddsCalculator
from holdem_sim.utils.card import Card
from holdem_sim.utils.constants import ActionType, Seat, Street


class Grade(StrEnum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


@dataclass(frozen=True)
class HandHistory:
    """Everything a reviewer needs to know about one finished hand."""

    hero_cards: tuple[Card, ...]
    community_cards: tuple[Card, ...]
    actions: tuple[ActionRecord, ...]
    pot: float
    player_stacks: dict[Seat, float]
    winners: tuple[Seat, ...]
    winning_cards: tuple[Card, ...] = ()
    hero: Seat = Seat.HERO
    small_blind: float = 0.5
    big_blind: float = 1.0
    small_blind_seat: Seat | None = None
    big_blind_seat: Seat | None = None
    hand_number: int = 0
    posted_blinds: dict[Seat, float] = field(default_factory=dict)

    @property
    def winner(self) -> Seat:
        return self.winners[0]

    @property
    def hero_won(self) -> bool:
        return self.hero in self.winners

    @property
    def hero_actions(self) -> list[ActionRecord]:
        return [a for a in self.actions if a.seat == self.hero]


@dataclass(frozen=True)
class DecisionMetrics:
    """Numbers behind one hero decision, computed before it was made."""

    street: Street
    action: ActionType
    amount: float
    pot: float  # Chips in the middle before the decision
    call_amount: float
    pot_odds: float
    equity: float
    outs: int
    hit_probability: float  # 0 when no cards are left to come
    expected_value: float

    @property
    def is_profitable_call(self) -> bool:
        return OddsCalculator.is_profitable_call(self.pot_odds, self.equity)


@dataclass(frozen=True)
class DecisionAnalysis:
    """A coach's verdict on one decision."""

    street: Street
    action: ActionType
    pot_odds: float
    hand_odds: float
    equity: float
    outs: int
    expected_value: float
    was_correct: bool
    feedback: str
    alternative_plays: tuple[str, ...] = ()


@dataclass(frozen=True)
class OpponentNote:
    seat: Seat
    style: str
    critical_actions: tuple[str, ...] = ()


@dataclass(frozen=True)
class CoachAnalysis:
    """A coach's review of a whole hand."""

    grade: Grade
    overall_feedback: str
    decisions: tuple[DecisionAnalysis, ...] = ()
    key_takeaways: tuple[str, ...] = ()
    hand_strength_summary: str = ""
    opponent_analysis: tuple[OpponentNote, ...] = ()


@runtime_checkable
class CoachProtocol(Protocol):
    """Interface a hand-review service must implement."""

    async def analyze_hand(self, history: HandHistory) -> CoachAnalysis:
        """Review a completed hand in detail."""
        ...

    async def get_hand_summary(self, history: HandHistory) -> str:
        """Short description of the hand without a full review."""
        ...


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


_BOARD_SIZE = {
    Street.PREFLOP: 0,
    Street.FLOP: 3,
    Street.TURN: 4,
    Street.RIVER: 5,
}

_CARDS_TO_COME = {
    Street.FLOP: 2,
    Street.TURN: 1,
}


def build_hand_history(
    state: GameState, outcome: HandOutcome, hero: Seat = Seat.HERO,
) -> HandHistory:
    """Package a resolved hand for review.

    Args:
        state: Snapshot taken after ``resolve_hand``.
        outcome: The value ``resolve_hand`` returned.
        hero: Seat whose cards and decisions are under review.
    """
    hero_player = state.player_at(hero)
    winning_cards = (
        outcome.winning_hand.best_five_cards if outcome.winning_hand else ()
    )
    return HandHistory(
        hero_cards=tuple(hero_player.hole_cards),
        community_cards=tuple(state.community_cards),
        actions=tuple(state.action_history),
        pot=outcome.pot,
        player_stacks={p.seat: p.stack for p in state.players},
        winners=outcome.winners,
        winning_cards=tuple(winning_cards),
        hero=hero,
        small_blind=state.small_blind,
        big_blind=state.big_blind,
        small_blind_seat=state.players[state.small_blind_index].seat,
        big_blind_seat=state.players[state.big_blind_index].seat,
        hand_number=state.hand_number,
        posted_blinds=dict(state.posted_blinds),
    )


def decision_metrics(
    history: HandHistory,
    num_opponents: int | None = None,
    iterations: int = DEFAULT_ITERATIONS,
    seed: int | None = None,
) -> list[DecisionMetrics]:
    """Replay a hand and measure every decision the hero made.

    The betting is replayed from the posted blinds and the action log, so each
    entry reflects the pot and the price the hero faced at that moment.

    Args:
        history: The hand to replay.
        num_opponents: Opponents for the equity estimate. Defaults to
            everyone else at the table.
        iterations: Monte Carlo iterations per decision.
        seed: Optional seed for reproducible equity estimates.
    """
    if len(history.hero_cards) != 2:
        return []
    if num_opponents is None:
        num_opponents = max(1, len(history.player_stacks) - 1)

    street_bets = dict(history.posted_blinds)
    current_bet = history.big_blind if street_bets else 0.0
    collected = 0.0
    street = Street.PREFLOP

    metrics: list[DecisionMetrics] = []
    for record in history.actions:
        if record.street != street:
            collected += sum(street_bets.values())
            street_bets = {}
            current_bet = 0.0
            street = record.street

        if record.seat == history.hero:
            board = list(history.community_cards[:_BOARD_SIZE[street]])
            pot = collected + sum(street_bets.values())
            to_call = max(0.0, current_bet - street_bets.get(record.seat, 0.0))
            equity = OddsCalculator.equity(
                list(history.hero_cards), board, num_opponents, iterations, seed,
            )
            outs = OddsCalculator.outs(list(history.hero_cards), board)
            cards_to_come = _CARDS_TO_COME.get(street)
            metrics.append(DecisionMetrics(
                street=street,
                action=record.action,
                amount=record.amount,
                pot=pot,
                call_amount=to_call,
                pot_odds=OddsCalculator.pot_odds(pot, to_call),
                equity=equity,
                outs=outs,
                hit_probability=(
                    OddsCalculator.hit_probability(outs, cards_to_come)
                    if cards_to_come else 0.0
                ),
                expected_value=OddsCalculator.expected_value(pot, to_call, equity),
            ))

        match record.action:
            case ActionType.CALL:
                street_bets[record.seat] = street_bets.get(record.seat, 0.0) + record.amount
            case ActionType.RAISE | ActionType.ALL_IN:
                street_bets[record.seat] = record.amount
                current_bet = max(current_bet, record.amount)

    return metrics


def format_hand_history(history: HandHistory) -> str:
    """Plain-text rendering of a hand, one action per line."""
    lines = [
        f"Hand #{history.hand_number}",
        f"Hero ({history.hero}): {' '.join(str(c) for c in history.hero_cards)}",
        f"Board: {' '.join(str(c) for c in history.community_cards) or '-'}",
    ]
    for record in history.actions:
        amount = f" {record.amount:g}" if record.amount else ""
        lines.append(f"  {record.street.value:<7} {record.seat:<10} {record.action.value}{amount}")
    winners = ", ".join(history.winners)
    lines.append(f"Pot {history.pot:g} to {winners}")
    return "\n".join(lines)
