"""Tests for the pre-flop hand strength heuristic."""

import pytest

from holdem_sim.strategy.preflop_strength import (
    StrengthCategory,
    adjust_for_position,
    categorize,
    evaluate_preflop_hand,
    position_category,
    position_multiplier,
    should_play_hand,
    should_raise_hand,
)
from holdem_sim.utils.card import Card
from holdem_sim.utils.constants import PositionCategory


def _score(hand: str) -> float:
    c1, c2 = (Card.from_str(c) for c in hand.split())
    return evaluate_preflop_hand(c1, c2).score


class TestHandScores:
    @pytest.mark.parametrize(
        "hand,expected",
        [
            ("Ah As", 95),
            ("Kh Ks", 90),
            ("Th Ts", 75),
            ("8h 8s", 65),
            ("7h 7s", 65),
            ("5h 5s", 60),
            ("2h 2s", 54),
        ],
    )
    def test_pairs(self, hand: str, expected: float) -> None:
        assert _score(hand) == expected

    @pytest.mark.parametrize(
        "hand,expected",
        [
            ("Ah Kh", 88),
            ("Ah Kd", 82),
            ("As Qs", 78),
            ("Ad Tc", 62),
            ("Ah 9h", 55),
            ("Ah 7d", 45),
            ("Ah 5h", 45),
            ("Ah 2d", 30),
        ],
    )
    def test_ace_high(self, hand: str, expected: float) -> None:
        assert _score(hand) == expected

    @pytest.mark.parametrize(
        "hand,expected",
        [
            ("Kh Qh", 76),
            ("Kh Qd", 70),
            ("Ks 9s", 58),
            ("Kd 4c", 35),
            ("Qh Jh", 69),
            ("Qd 3c", 33),
            ("Jh Th", 62),
            ("Jd 9c", 44),
            ("Js 2s", 44),
        ],
    )
    def test_broadway_high(self, hand: str, expected: float) -> None:
        assert _score(hand) == expected

    @pytest.mark.parametrize(
        "hand,expected",
        [
            ("9h 8h", 44),  # adjacent suited: 35 + 9
            ("9h 8d", 34),  # adjacent offsuit: 25 + 9
            ("9h 6h", 39),  # suited: 30 + 9
            ("9h 4d", 24),  # offsuit: 15 + 9
        ],
    )
    def test_low_combinations(self, hand: str, expected: float) -> None:
        assert _score(hand) == expected

    def test_card_order_irrelevant(self) -> None:
        assert _score("Kd Ah") == _score("Ah Kd")


class TestCategories:
    def test_boundaries(self) -> None:
        assert categorize(80) == StrengthCategory.PREMIUM
        assert categorize(79.9) == StrengthCategory.STRONG
        assert categorize(65) == StrengthCategory.STRONG
        assert categorize(45) == StrengthCategory.PLAYABLE
        assert categorize(30) == StrengthCategory.WEAK
        assert categorize(29) == StrengthCategory.TRASH

    def test_hand_category(self) -> None:
        aces = evaluate_preflop_hand(Card.from_str("Ah"), Card.from_str("As"))
        assert aces.category == StrengthCategory.PREMIUM


class TestPosition:
    def test_four_handed_mapping(self) -> None:
        assert position_category(0, 0, 4) == PositionCategory.BUTTON
        assert position_category(1, 0, 4) == PositionCategory.EARLY
        assert position_category(2, 0, 4) == PositionCategory.EARLY
        assert position_category(3, 0, 4) == PositionCategory.LATE

    def test_wraps_around_dealer(self) -> None:
        assert position_category(1, 2, 4) == PositionCategory.LATE

    def test_heads_up(self) -> None:
        assert position_category(1, 0, 2) == PositionCategory.EARLY

    def test_full_ring(self) -> None:
        assert position_category(3, 0, 9) == PositionCategory.EARLY
        assert position_category(5, 0, 9) == PositionCategory.MIDDLE
        assert position_category(7, 0, 9) == PositionCategory.LATE

    def test_multipliers(self) -> None:
        assert position_multiplier(PositionCategory.EARLY) == 0.8
        assert position_multiplier(PositionCategory.BUTTON) == 1.2

    def test_adjust_for_position(self) -> None:
        assert adjust_for_position(50, PositionCategory.BUTTON) == pytest.approx(54)
        assert adjust_for_position(50, PositionCategory.EARLY) == pytest.approx(46)


class TestThresholds:
    def test_tight_player_folds_middling_hand(self) -> None:
        # vpip 20: threshold 76
        assert not should_play_hand(70, 20)
        assert should_play_hand(76.5, 20)

    def test_position_loosens_play(self) -> None:
        assert should_play_hand(70, 20, 1.2)

    def test_raise_threshold(self) -> None:
        # pfr 18: threshold 77.9
        assert should_raise_hand(78, 18)
        assert not should_raise_hand(77, 18)
