"""Tests for cards and the deck."""

import random

import pytest

from holdem_sim.core.errors import DeckExhaustedError
from holdem_sim.utils.card import Card, Deck, create_deck, shuffle_deck, sort_by_rank
from holdem_sim.utils.constants import Rank, Suit


def _cards(s: str) -> list[Card]:
    """Helper: parse space-separated card strings like 'Ah Kh'."""
    return [Card.from_str(c) for c in s.split()]


class TestCard:
    def test_from_str(self) -> None:
        card = Card.from_str("Ah")
        assert card.rank == Rank.ACE
        assert card.suit == Suit.HEARTS

    def test_from_str_is_case_tolerant(self) -> None:
        assert Card.from_str("tD") == Card(Rank.TEN, Suit.DIAMONDS)

    def test_str_round_trip(self) -> None:
        assert str(Card.from_str("9c")) == "9c"

    def test_value(self) -> None:
        assert Card.from_str("As").value == 14
        assert Card.from_str("2s").value == 2

    def test_invalid_length(self) -> None:
        with pytest.raises(ValueError, match="2 characters"):
            Card.from_str("10h")

    def test_invalid_rank(self) -> None:
        with pytest.raises(ValueError, match="Invalid rank"):
            Card.from_str("Xh")

    def test_invalid_suit(self) -> None:
        with pytest.raises(ValueError, match="Invalid suit"):
            Card.from_str("Ax")

    def test_ordering_by_rank(self) -> None:
        assert Card.from_str("Kd") > Card.from_str("Qs")

    def test_hashable(self) -> None:
        assert len({Card.from_str("Ah"), Card.from_str("Ah")}) == 1

    def test_sort_by_rank_descending(self) -> None:
        ordered = sort_by_rank(_cards("2c Ah 9d Kh"))
        assert [str(c) for c in ordered] == ["Ah", "Kh", "9d", "2c"]


class TestDeck:
    def test_create_deck_has_52_unique_cards(self) -> None:
        deck = create_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52

    def test_shuffle_deck_leaves_input_untouched(self) -> None:
        cards = create_deck()
        shuffled = shuffle_deck(cards, random.Random(1))
        assert cards == create_deck()
        assert sorted(shuffled, key=str) == sorted(cards, key=str)

    def test_deal_removes_cards(self) -> None:
        deck = Deck(random.Random(3))
        dealt = deck.deal(5)
        assert len(dealt) == 5
        assert deck.remaining == 47
        assert deck.dealt == dealt

    def test_deal_never_repeats(self) -> None:
        deck = Deck(random.Random(3))
        cards = deck.deal(52)
        assert len(set(cards)) == 52

    def test_deal_too_many(self) -> None:
        deck = Deck(random.Random(3))
        deck.deal(50)
        with pytest.raises(DeckExhaustedError, match="Cannot deal 3 cards, only 2 remaining"):
            deck.deal(3)

    def test_seeded_decks_match(self) -> None:
        a = Deck(random.Random(42)).deal(10)
        b = Deck(random.Random(42)).deal(10)
        assert a == b

    def test_reset_restores_full_deck(self) -> None:
        deck = Deck(random.Random(0))
        deck.deal(20)
        deck.reset()
        assert deck.remaining == 52
        assert deck.dealt == []

    def test_stacked_deck_deals_in_order(self) -> None:
        deck = Deck(cards=_cards("Ah Kh Qh"))
        assert deck.deal_one() == Card.from_str("Ah")
        assert deck.deal(2) == _cards("Kh Qh")

    def test_stacked_deck_rejects_duplicates(self) -> None:
        with pytest.raises(ValueError, match="duplicate"):
            Deck(cards=_cards("Ah Ah"))

    def test_remove(self) -> None:
        deck = Deck(random.Random(0))
        deck.remove(_cards("Ah Kd"))
        assert deck.remaining == 50
        assert Card.from_str("Ah") not in deck.deal(50)

    def test_remove_missing_card(self) -> None:
        deck = Deck(cards=_cards("Ah"))
        with pytest.raises(ValueError, match="not in deck"):
            deck.remove(_cards("Kd"))
