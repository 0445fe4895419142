"""Decision engine for scripted AI opponents.

Maps a style profile, the acting player and a game state snapshot to a
single BetAction:

  Pre-flop:  starting-hand score x position multiplier
             -> VPIP gate (play or fold)
             -> PFR gate + aggression coin flip (raise or check/call)
  Post-flop: made-hand ranking -> fixed strength percentage
             -> pot odds, scary-board bluff check, aggression coin flip

Every raise goes through one sizing rule and is clamped so it is never
below the minimum raise and never more than the player's stack (in
which case the player moves all-in instead). Inputs are never mutated.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Protocol

from holdem_sim.core.betting_rules import call_amount
from holdem_sim.core.game_state import BetAction, GameState, PlayerState
from holdem_sim.core.hand_evaluator import HandEvaluator
from holdem_sim.core.odds_calculator import OddsCalculator
from holdem_sim.strategy.player_styles import PlayerStyleConfig
from holdem_sim.strategy.preflop_strength import (
    evaluate_preflop_hand,
    position_category,
    position_multiplier,
    should_play_hand,
    should_raise_hand,
)
from holdem_sim.utils.card import Card
from holdem_sim.utils.constants import HandRanking, Street

logger = logging.getLogger("holdem_sim.strategy")


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. random.Random."""

    def random(self) -> float: ...


# Post-flop strength percentage by made-hand ranking
HAND_STRENGTH: dict[HandRanking, float] = {
    HandRanking.ROYAL_FLUSH: 100,
    HandRanking.STRAIGHT_FLUSH: 95,
    HandRanking.FOUR_OF_A_KIND: 90,
    HandRanking.FULL_HOUSE: 85,
    HandRanking.FLUSH: 75,
    HandRanking.STRAIGHT: 70,
    HandRanking.THREE_OF_A_KIND: 60,
    HandRanking.TWO_PAIR: 50,
    HandRanking.ONE_PAIR: 35,
    HandRanking.HIGH_CARD: 20,
}

SCARY_BOARD_BLUFF_BONUS = 0.2


# ---------------------------------------------------------------------------
# Board texture analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoardTexture:
    """What the community cards make possible for the rest of the table."""

    three_to_flush: bool = False  # 3+ cards of one suit
    three_to_straight: bool = False  # 3 cards within a 5-rank span

    @property
    def is_scary(self) -> bool:
        return self.three_to_flush or self.three_to_straight


def analyze_board(community_cards: list[Card]) -> BoardTexture:
    """Analyze the texture of the community cards."""
    if len(community_cards) < 3:
        return BoardTexture()

    suit_counts = Counter(c.suit for c in community_cards)
    values = sorted(c.value for c in community_cards)
    connected = any(
        values[i + 2] - values[i] <= 4 for i in range(len(values) - 2)
    )
    return BoardTexture(
        three_to_flush=max(suit_counts.values()) >= 3,
        three_to_straight=connected,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def hand_strength(ranking: HandRanking) -> float:
    """Strength percentage used post-flop for a made hand."""
    return HAND_STRENGTH.get(ranking, 20)


def raise_multiplier(strength: float, aggression: float) -> float:
    """Fraction of the pot to raise, interpolated by aggression.

    strength >= 85: 0.75x to 2.25x pot
    strength >= 70: 0.5x to 1.5x pot
    otherwise:      0.33x to 1.0x pot
    """
    a = aggression / 10
    if strength >= 85:
        return 0.75 + a * 1.5
    if strength >= 70:
        return 0.5 + a * 1.0
    return 0.33 + a * 0.67


def _raise(player: PlayerState, state: GameState, amount: float) -> BetAction:
    """Clamp a raise-to amount into something legal for ``player``."""
    target = max(amount, state.min_raise)
    max_total = player.stack + player.current_bet
    if target >= max_total:
        return BetAction.all_in(max_total)
    return BetAction.raise_to(target)


def _call(player: PlayerState, state: GameState) -> BetAction:
    return BetAction.call(call_amount(player, state.current_bet))


# ---------------------------------------------------------------------------
# Decision entry points
# ---------------------------------------------------------------------------


def decide(
    player: PlayerState,
    style: PlayerStyleConfig,
    state: GameState,
    rng: RandomSource | None = None,
) -> BetAction:
    """Choose an action for ``player`` given a state snapshot.

    Args:
        player: The acting player.
        style: The seat's style profile.
        state: Current game state; only read.
        rng: Source of the coin flips. Defaults to a fresh random.Random.

    Returns:
        A BetAction the betting engine will accept for this player.
    """
    rng = rng or random.Random()
    if len(player.hole_cards) != 2:
        logger.debug("%s has no hole cards, folding", player.name)
        return BetAction.fold()

    if state.street == Street.PREFLOP:
        action = _decide_preflop(player, style, state, rng)
    else:
        action = _decide_postflop(player, style, state, rng)

    logger.debug(
        "%s (%s) %s -> %s", player.name, style.name, state.street.value, action,
    )
    return action


def _is_aggressive(style: PlayerStyleConfig, rng: RandomSource) -> bool:
    """Aggression coin flip: succeeds with probability aggression / 10."""
    return rng.random() > (10 - style.aggression) / 10


def _size_raise(
    player: PlayerState,
    style: PlayerStyleConfig,
    state: GameState,
    strength: float,
) -> BetAction:
    amount = state.total_pot * raise_multiplier(strength, style.aggression)
    return _raise(player, state, amount)


def _decide_preflop(
    player: PlayerState,
    style: PlayerStyleConfig,
    state: GameState,
    rng: RandomSource,
) -> BetAction:
    card1, card2 = player.hole_cards
    score = evaluate_preflop_hand(card1, card2).score

    category = position_category(
        state.index_of(player.seat), state.dealer_index, len(state.players),
    )
    multiplier = position_multiplier(category)
    adjusted = score * multiplier
    logger.debug(
        "%s preflop score %.0f (%s, adjusted %.1f)",
        player.name, score, category.value, adjusted,
    )

    if not should_play_hand(score, style.vpip, multiplier):
        return BetAction.fold()

    wants_raise = should_raise_hand(score, style.pfr, multiplier)
    to_call = state.current_bet - player.current_bet

    if to_call <= 0:
        if wants_raise and _is_aggressive(style, rng):
            return _size_raise(player, style, state, adjusted)
        return BetAction.check()

    if wants_raise and adjusted >= 75:
        return _size_raise(player, style, state, adjusted)
    if adjusted >= 50 or _should_call(style, state.total_pot, to_call, adjusted):
        return _call(player, state)
    return BetAction.fold()


def _should_call(
    style: PlayerStyleConfig, pot: float, to_call: float, strength: float,
) -> bool:
    """Looser styles call more; any hand beating the pot odds calls."""
    pot_odds = OddsCalculator.pot_odds(pot, to_call)
    return strength >= 100 - style.vpip or strength > pot_odds


def _decide_postflop(
    player: PlayerState,
    style: PlayerStyleConfig,
    state: GameState,
    rng: RandomSource,
) -> BetAction:
    made = HandEvaluator.evaluate(player.hole_cards + state.community_cards)
    strength = hand_strength(made.ranking)
    to_call = state.current_bet - player.current_bet
    pot_odds = OddsCalculator.pot_odds(state.total_pot, max(to_call, 0.0))

    texture = analyze_board(state.community_cards)
    bonus = SCARY_BOARD_BLUFF_BONUS if texture.is_scary else 0.0
    bluffing = rng.random() < style.bluff_frequency + bonus

    logger.debug(
        "%s holds %s (strength %.0f, pot odds %.1f%%, bluff=%s)",
        player.name, made.description, strength, pot_odds, bluffing,
    )

    if to_call <= 0:
        if strength >= 60 and _is_aggressive(style, rng):
            return _size_raise(player, style, state, strength)
        if bluffing and style.aggression >= 6:
            return _raise(player, state, state.total_pot * 0.5)
        return BetAction.check()

    if strength >= 75:
        if _is_aggressive(style, rng):
            return _size_raise(player, style, state, strength)
        return _call(player, state)
    if strength >= 50:
        if _is_aggressive(style, rng) and rng.random() < 0.3:
            return _size_raise(player, style, state, strength)
        return _call(player, state)
    # Made-hand strength stands in for equity
    if strength > pot_odds or bluffing:
        if bluffing and rng.random() < style.bluff_frequency:
            return _size_raise(player, style, state, 40)
        return _call(player, state)
    return BetAction.fold()


class AIOpponent:
    """An AI seat bound to one style profile for the whole session.

    Usage:
        ai = AIOpponent(get_player_style("tight-aggressive"))
        action = ai.decide(player, engine.state)
    """

    def __init__(
        self, style: PlayerStyleConfig, rng: RandomSource | None = None,
    ) -> None:
        self._style = style
        self._rng = rng or random.Random()

    @property
    def style(self) -> PlayerStyleConfig:
        return self._style

    def decide(self, player: PlayerState, state: GameState) -> BetAction:
        return decide(player, self._style, state, self._rng)
