"""Headless hand driver for simulation.

Runs complete hands through the BettingEngine, asking an AIOpponent
(or a caller-supplied policy for the hero) for every action.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from holdem_sim.core.betting_engine import BettingEngine
from holdem_sim.core.game_state import BetAction, GameState, PlayerState
from holdem_sim.core.table_config import TableConfig
from holdem_sim.interface.hand_history import HandHistory, build_hand_history
from holdem_sim.strategy.decision_maker import AIOpponent
from holdem_sim.strategy.player_styles import PlayerStyleConfig
from holdem_sim.utils.card import Deck
from holdem_sim.utils.constants import HandRanking, Phase, Seat

logger = logging.getLogger("holdem_sim.simulation")

HeroPolicy = Callable[[PlayerState, GameState], BetAction]


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass
class HandRecord:
    """Record of a single played hand."""

    hand_number: int
    winners: list[Seat]
    pot_size: float
    community_cards: list[str]
    player_hands: dict[Seat, list[str]]
    winning_hand_ranking: HandRanking | None
    actions_summary: list[str]
    profits: dict[Seat, float] = field(default_factory=dict)
    history: HandHistory | None = None

    @property
    def hero_profit(self) -> float:
        return self.profits.get(Seat.HERO, 0.0)

    @property
    def went_to_showdown(self) -> bool:
        return self.winning_hand_ranking is not None


# ---------------------------------------------------------------------------
# Game driver
# ---------------------------------------------------------------------------


class PokerGame:
    """Plays hands at one table until the caller stops asking.

    Usage:
        game = PokerGame(players, {Seat.OPPONENT1: style, ...}, hero_policy=ask_user)
        record = game.play_hand()
    """

    def __init__(
        self,
        players: list[PlayerState],
        styles: dict[Seat, PlayerStyleConfig],
        config: TableConfig | None = None,
        hero_policy: HeroPolicy | None = None,
        seed: int | None = None,
    ) -> None:
        """Set up the table.

        Args:
            players: Seats in table order; their stacks are updated in place.
            styles: Style for every AI seat.
            config: Blinds and engine rules. Defaults to TableConfig().
            hero_policy: Chooses actions for the hero seat when it has no style.
            seed: Seed for the deck and the AI coin flips.

        Raises:
            ValueError: If a seat has neither a style nor a policy.
        """
        self.players = players
        self.config = config or TableConfig()
        self._rng = random.Random(seed)
        self._hero_policy = hero_policy

        self._ai: dict[Seat, AIOpponent] = {}
        for player in players:
            style = styles.get(player.seat)
            if style is not None:
                self._ai[player.seat] = AIOpponent(
                    style, random.Random(self._rng.getrandbits(32)),
                )
            elif player.seat != Seat.HERO or hero_policy is None:
                raise ValueError(f"No style or policy for seat {player.seat}")

        self.engine = BettingEngine.from_config(
            players, self.config, deck_factory=self._new_deck,
        )

    def _new_deck(self) -> Deck:
        return Deck(rng=self._rng)

    @property
    def ai_opponents(self) -> dict[Seat, AIOpponent]:
        return dict(self._ai)

    def rebuy_busted(self, amount: float | None = None) -> list[Seat]:
        """Top up every seat with no chips left; returns the seats topped up."""
        if self.engine.phase != Phase.WAITING:
            raise ValueError("Rebuys are only allowed between hands")
        amount = self.config.starting_stack if amount is None else amount
        rebought = []
        for player in self.players:
            if player.stack <= 0:
                player.stack = amount
                rebought.append(player.seat)
                logger.info("%s rebuys for %g", player.name, amount)
        return rebought

    def _choose(self, player: PlayerState, state: GameState) -> BetAction:
        ai = self._ai.get(player.seat)
        if ai is not None:
            return ai.decide(player, state)
        return self._hero_policy(player, state)

    def play_hand(self) -> HandRecord:
        """Play a complete hand and return the record."""
        starting = {p.seat: p.stack for p in self.players}

        state = self.engine.start_hand()
        sb = state.players[state.small_blind_index]
        bb = state.players[state.big_blind_index]
        actions_summary = [
            f"{sb.name} posts SB {state.posted_blinds.get(sb.seat, 0.0):g}",
            f"{bb.name} posts BB {state.posted_blinds.get(bb.seat, 0.0):g}",
        ]
        street = state.street
        actions_summary.append(f"--- {street.value} ---")

        while state.phase == Phase.BETTING:
            player = state.acting_player
            action = self._choose(player, state)
            state = self.engine.apply_action(action)
            actions_summary.append(f"{player.name}: {action}")
            if state.phase == Phase.BETTING and state.street != street:
                street = state.street
                board = " ".join(str(c) for c in state.community_cards)
                actions_summary.append(f"--- {street.value} [{board}] ---")

        outcome = self.engine.resolve_hand()
        final = self.engine.state

        history = None
        if any(p.seat == Seat.HERO for p in final.players):
            history = build_hand_history(final, outcome)

        return HandRecord(
            hand_number=final.hand_number,
            winners=list(outcome.winners),
            pot_size=outcome.pot,
            community_cards=[str(c) for c in outcome.community_cards],
            player_hands={
                p.seat: [str(c) for c in p.hole_cards] for p in final.players
            },
            winning_hand_ranking=(
                outcome.winning_hand.ranking if outcome.winning_hand else None
            ),
            actions_summary=actions_summary,
            profits={p.seat: p.stack - starting[p.seat] for p in final.players},
            history=history,
        )
