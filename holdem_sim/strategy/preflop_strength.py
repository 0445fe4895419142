"""Pre-flop hand strength heuristic.

Scores a two-card starting hand on a 0-100 scale from a static table:
pocket pairs by rank, Ace/King/Queen/Jack-high hands by kicker and
suitedness, and everything else by a formula over suitedness, the high
card and whether the two ranks are adjacent. Position categories and the
VPIP/PFR thresholds the AI uses to decide whether to enter a pot live
here too.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from holdem_sim.utils.card import Card
from holdem_sim.utils.constants import PositionCategory


class StrengthCategory(StrEnum):
    PREMIUM = "premium"
    STRONG = "strong"
    PLAYABLE = "playable"
    WEAK = "weak"
    TRASH = "trash"


@dataclass(frozen=True)
class PreflopStrength:
    category: StrengthCategory
    score: float


# Multipliers used by the AI when weighing a hand by seat
POSITION_MULTIPLIERS: dict[PositionCategory, float] = {
    PositionCategory.EARLY: 0.8,
    PositionCategory.MIDDLE: 0.9,
    PositionCategory.LATE: 1.1,
    PositionCategory.BUTTON: 1.2,
}

# Milder adjustment for displaying a hand's strength by seat
POSITION_ADJUSTMENTS: dict[PositionCategory, float] = {
    PositionCategory.EARLY: 0.92,
    PositionCategory.MIDDLE: 0.96,
    PositionCategory.LATE: 1.04,
    PositionCategory.BUTTON: 1.08,
}

# (minimum kicker, suited score, offsuit score), best kicker first.
# The final row of each table catches every lower kicker.
_ACE_HIGH = [(13, 88, 82), (12, 78, 72), (11, 73, 67), (10, 68, 62), (7, 55, 45), (2, 45, 30)]
_KING_HIGH = [(12, 76, 70), (11, 71, 65), (10, 66, 58), (9, 58, 48), (2, 48, 35)]
_QUEEN_HIGH = [(11, 69, 63), (10, 64, 56), (9, 56, 46), (2, 46, 33)]
_JACK_HIGH = [(10, 62, 54), (9, 54, 44), (2, 44, 31)]

_BROADWAY_TABLES = {
    14: _ACE_HIGH,
    13: _KING_HIGH,
    12: _QUEEN_HIGH,
    11: _JACK_HIGH,
}

_PAIR_SCORES = {14: 95, 13: 90, 12: 85, 11: 80, 10: 75}


def _pair_score(value: int) -> float:
    if value in _PAIR_SCORES:
        return _PAIR_SCORES[value]
    if value >= 7:
        return 65
    return 50 + value * 2


def _kicker_score(table: list[tuple[int, int, int]], low: int, suited: bool) -> float:
    for min_kicker, suited_score, offsuit_score in table:
        if low >= min_kicker:
            return suited_score if suited else offsuit_score
    return table[-1][1] if suited else table[-1][2]


def categorize(score: float) -> StrengthCategory:
    if score >= 80:
        return StrengthCategory.PREMIUM
    if score >= 65:
        return StrengthCategory.STRONG
    if score >= 45:
        return StrengthCategory.PLAYABLE
    if score >= 30:
        return StrengthCategory.WEAK
    return StrengthCategory.TRASH


def evaluate_preflop_hand(card1: Card, card2: Card) -> PreflopStrength:
    """Score a starting hand.

    Args:
        card1: First hole card.
        card2: Second hole card.

    Returns:
        PreflopStrength with the 0-100 score and its category.
    """
    high = max(card1.value, card2.value)
    low = min(card1.value, card2.value)
    suited = card1.suit == card2.suit
    gap = high - low

    if high == low:
        score = _pair_score(high)
    elif high in _BROADWAY_TABLES:
        score = _kicker_score(_BROADWAY_TABLES[high], low, suited)
    elif gap == 1:
        score = (35 if suited else 25) + high
    elif suited:
        score = 30 + high
    else:
        score = 15 + high

    return PreflopStrength(category=categorize(score), score=score)


def position_category(
    player_index: int, dealer_index: int, total_players: int,
) -> PositionCategory:
    """Classify a seat by its distance after the dealer.

    The dealer is the button and the two blinds are early. At a
    four-handed table the seat before the button is late; larger tables
    split the remaining seats into early, middle and late.
    """
    seats_after = (player_index - dealer_index) % total_players

    if seats_after == 0:
        return PositionCategory.BUTTON
    if seats_after in (1, 2):
        return PositionCategory.EARLY
    if total_players == 4:
        return PositionCategory.LATE if seats_after == 3 else PositionCategory.MIDDLE
    if seats_after <= 3:
        return PositionCategory.EARLY
    if seats_after <= 5:
        return PositionCategory.MIDDLE
    return PositionCategory.LATE


def position_multiplier(category: PositionCategory) -> float:
    return POSITION_MULTIPLIERS.get(category, 1.0)


def adjust_for_position(base_score: float, category: PositionCategory) -> float:
    """Loosen or tighten a score slightly by seat."""
    return base_score * POSITION_ADJUSTMENTS.get(category, 1.0)


def should_play_hand(
    score: float, vpip: float, position_adjustment: float = 1.0,
) -> bool:
    """Whether a style with the given VPIP enters the pot with this hand."""
    return score * position_adjustment >= (100 - vpip) * 0.95


def should_raise_hand(
    score: float, pfr: float, position_adjustment: float = 1.0,
) -> bool:
    """Whether a style with the given PFR raises with this hand."""
    return score * position_adjustment >= (100 - pfr) * 0.95
