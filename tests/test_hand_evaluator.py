"""Tests for the hand evaluator."""

import pytest

from holdem_sim.core.errors import InsufficientCardsError
from holdem_sim.core.hand_evaluator import HandEvaluator, compare_hands
from holdem_sim.utils.card import Card
from holdem_sim.utils.constants import HandComparison, HandRanking


def _cards(s: str) -> list[Card]:
    """Helper: parse space-separated card strings like 'Ah Kh Qh Jh Th'."""
    return [Card.from_str(c) for c in s.split()]


def _values(s: str) -> tuple[int, ...]:
    return tuple(c.value for c in _cards(s))


class TestHandRankings:
    def test_royal_flush(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Kh Qh Jh Th"))
        assert result.ranking == HandRanking.ROYAL_FLUSH
        assert result.description == "Royal Flush"

    def test_straight_flush(self) -> None:
        result = HandEvaluator.evaluate(_cards("9s 8s 7s 6s 5s"))
        assert result.ranking == HandRanking.STRAIGHT_FLUSH
        assert result.description == "Straight Flush, 9 high"

    def test_straight_flush_wheel(self) -> None:
        result = HandEvaluator.evaluate(_cards("5d 4d 3d 2d Ad"))
        assert result.ranking == HandRanking.STRAIGHT_FLUSH
        assert result.rank_values == (5, 4, 3, 2, 14)

    def test_four_of_a_kind(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ks Kh Kd Kc 3s"))
        assert result.ranking == HandRanking.FOUR_OF_A_KIND
        assert result.description == "Four of a Kind, Ks"

    def test_full_house(self) -> None:
        result = HandEvaluator.evaluate(_cards("Jh Jd Jc 8s 8h"))
        assert result.ranking == HandRanking.FULL_HOUSE
        assert result.description == "Full House, Js over 8s"

    def test_flush(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Th 7h 4h 2h"))
        assert result.ranking == HandRanking.FLUSH

    def test_straight(self) -> None:
        result = HandEvaluator.evaluate(_cards("9h 8s 7d 6c 5h"))
        assert result.ranking == HandRanking.STRAIGHT

    def test_straight_wheel(self) -> None:
        result = HandEvaluator.evaluate(_cards("5h 4s 3d 2c Ah"))
        assert result.ranking == HandRanking.STRAIGHT
        assert result.rank_values == (5, 4, 3, 2, 14)
        assert "Wheel" in result.description

    def test_three_of_a_kind(self) -> None:
        result = HandEvaluator.evaluate(_cards("Qs Qh Qd 7c 3s"))
        assert result.ranking == HandRanking.THREE_OF_A_KIND

    def test_two_pair(self) -> None:
        result = HandEvaluator.evaluate(_cards("As Ah 8d 8c 4s"))
        assert result.ranking == HandRanking.TWO_PAIR
        assert result.description == "Two Pair, As and 8s"

    def test_one_pair(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ts Th 9d 5c 2s"))
        assert result.ranking == HandRanking.ONE_PAIR
        assert result.description == "Pair of Ts"

    def test_high_card(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Ks 9d 5c 2h"))
        assert result.ranking == HandRanking.HIGH_CARD
        assert result.description == "High Card, A"


class TestSevenCardEvaluation:
    def test_best_five_from_seven(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Kh Qh Jh Th 3c 2d"))
        assert result.ranking == HandRanking.ROYAL_FLUSH
        assert len(result.best_five_cards) == 5

    def test_higher_straight_preferred_over_wheel(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah 2c 3d 4s 5h 6c 9d"))
        assert result.ranking == HandRanking.STRAIGHT
        assert result.rank_values == (6, 5, 4, 3, 2)

    def test_two_trips_make_full_house(self) -> None:
        result = HandEvaluator.evaluate(_cards("9h 9d 9c 4s 4h 4d Kc"))
        assert result.ranking == HandRanking.FULL_HOUSE
        assert result.rank_values == (9, 9, 9, 4, 4)

    def test_full_house_uses_best_pair(self) -> None:
        result = HandEvaluator.evaluate(_cards("7h 7d 7c Qs Qh 2d 2c"))
        assert result.rank_values == (7, 7, 7, 12, 12)

    def test_three_pairs_keep_best_two_and_kicker(self) -> None:
        result = HandEvaluator.evaluate(_cards("Kh Kd 8c 8s 3h 3d 6c"))
        assert result.ranking == HandRanking.TWO_PAIR
        assert result.rank_values == (13, 13, 8, 8, 6)

    def test_best_flush_of_six_suited(self) -> None:
        result = HandEvaluator.evaluate(_cards("Ah Jh 9h 6h 4h 2h Kc"))
        assert result.ranking == HandRanking.FLUSH
        assert result.rank_values == (14, 11, 9, 6, 4)

    def test_quads_take_highest_kicker(self) -> None:
        result = HandEvaluator.evaluate(_cards("5h 5d 5c 5s 2h Ad 9c"))
        assert result.rank_values == (5, 5, 5, 5, 14)

    def test_straight_flush_beats_flush_in_same_suit(self) -> None:
        result = HandEvaluator.evaluate(_cards("8s 7s 6s 5s 4s As 2d"))
        assert result.ranking == HandRanking.STRAIGHT_FLUSH
        assert result.rank_values == (8, 7, 6, 5, 4)

    def test_order_of_input_does_not_matter(self) -> None:
        a = HandEvaluator.evaluate(_cards("2c Kd 7h Ks 9d"))
        b = HandEvaluator.evaluate(_cards("Ks 9d 2c 7h Kd"))
        assert a == b


class TestInvalidInput:
    def test_fewer_than_five_cards(self) -> None:
        with pytest.raises(InsufficientCardsError, match="Need at least 5 cards, got 4"):
            HandEvaluator.evaluate(_cards("Ah Kh Qh Jh"))

    def test_insufficient_cards_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            HandEvaluator.evaluate([])

    def test_duplicate_cards(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            HandEvaluator.evaluate(_cards("Ah Ah Qh Jh Th"))


class TestHandComparison:
    def test_flush_beats_straight(self) -> None:
        flush = HandEvaluator.evaluate(_cards("Ah Th 7h 4h 2h"))
        straight = HandEvaluator.evaluate(_cards("9h 8s 7d 6c 5h"))
        assert flush > straight
        assert compare_hands(flush, straight) == HandComparison.WIN
        assert compare_hands(straight, flush) == HandComparison.LOSE

    def test_kicker_decides_pair(self) -> None:
        high_kicker = HandEvaluator.evaluate(_cards("As Ah Kd 7c 3s"))
        low_kicker = HandEvaluator.evaluate(_cards("As Ah Qd 7c 3s"))
        assert compare_hands(high_kicker, low_kicker) == HandComparison.WIN

    def test_wheel_loses_to_six_high_straight(self) -> None:
        wheel = HandEvaluator.evaluate(_cards("5h 4s 3d 2c Ah"))
        six_high = HandEvaluator.evaluate(_cards("6h 5s 4d 3c 2h"))
        assert compare_hands(wheel, six_high) == HandComparison.LOSE

    def test_exact_tie(self) -> None:
        hand1 = HandEvaluator.evaluate(_cards("As Kh Qd Jc 9s"))
        hand2 = HandEvaluator.evaluate(_cards("Ah Ks Qc Jd 9h"))
        assert hand1 == hand2
        assert compare_hands(hand1, hand2) == HandComparison.TIE

    def test_fifth_card_breaks_tie(self) -> None:
        a = HandEvaluator.evaluate(_cards("Ks Kh 9d 7c 4s"))
        b = HandEvaluator.evaluate(_cards("Kd Kc 9h 7s 3s"))
        assert a.rank_values == _values("Ks Kh 9d 7c 4s")
        assert compare_hands(a, b) == HandComparison.WIN

    def test_max_picks_best(self) -> None:
        hands = [
            HandEvaluator.evaluate(_cards("As Ah Kd 7c 3s")),
            HandEvaluator.evaluate(_cards("Jh Jd Jc 8s 8h")),
            HandEvaluator.evaluate(_cards("9h 8s 7d 6c 5h")),
        ]
        assert max(hands).ranking == HandRanking.FULL_HOUSE
