"""Card and Deck classes for hold'em."""

from __future__ import annotations

import random
from dataclasses import dataclass
from functools import total_ordering

from holdem_sim.core.errors import DeckExhaustedError
from holdem_sim.utils.constants import RANK_VALUES, Rank, Suit


@total_ordering
@dataclass(frozen=True)
class Card:
    """Represents a single playing card."""

    rank: Rank
    suit: Suit

    @classmethod
    def from_str(cls, s: str) -> Card:
        """Create a Card from a 2-character string like 'Ah' or 'Td'.

        Args:
            s: A 2-character string where the first char is the rank
               and the second is the suit.

        Returns:
            A new Card instance.

        Raises:
            ValueError: If the string is not exactly 2 characters or
                       contains invalid rank/suit characters.
        """
        if len(s) != 2:
            raise ValueError(f"Card string must be 2 characters, got '{s}'")
        try:
            rank = Rank(s[0].upper())
        except ValueError:
            raise ValueError(f"Invalid rank character: '{s[0]}'")
        try:
            suit = Suit(s[1].lower())
        except ValueError:
            raise ValueError(f"Invalid suit character: '{s[1]}'")
        return cls(rank=rank, suit=suit)

    @property
    def value(self) -> int:
        """Numeric value of the card's rank (2-14)."""
        return RANK_VALUES[self.rank]

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card('{self}')"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.value < other.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank == other.rank and self.suit == other.suit

    def __hash__(self) -> int:
        return hash((self.rank, self.suit))


def create_deck() -> list[Card]:
    """Return the 52 cards in a fixed suit-major order."""
    return [Card(rank=rank, suit=suit) for suit in Suit for rank in Rank]


def shuffle_deck(
    cards: list[Card], rng: random.Random | None = None,
) -> list[Card]:
    """Return a shuffled copy of ``cards``; the input list is untouched."""
    shuffled = list(cards)
    (rng or random).shuffle(shuffled)
    return shuffled


def sort_by_rank(cards: list[Card]) -> list[Card]:
    """Sort cards by rank value, highest first."""
    return sorted(cards, key=lambda c: c.value, reverse=True)


class Deck:
    """Standard 52-card deck with shuffle and deal operations.

    A deck shrinks as cards are dealt; a dealt card never comes back
    until ``reset()`` builds a fresh deck.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        cards: list[Card] | None = None,
    ) -> None:
        """Build a deck.

        Args:
            rng: Random source used for shuffling (module ``random`` if None).
            cards: Optional pre-arranged order to deal from, top card first.
                   When given, the deck is not shuffled.
        """
        self._rng = rng
        self._cards: list[Card] = []
        self._dealt: list[Card] = []
        if cards is not None:
            if len(set(cards)) != len(cards):
                raise ValueError("Deck contains duplicate cards")
            self._cards = list(cards)
        else:
            self.reset()

    def reset(self) -> None:
        """Reset and shuffle the deck."""
        self._cards = create_deck()
        self._dealt = []
        self.shuffle()

    def shuffle(self) -> None:
        """Shuffle the remaining cards in the deck."""
        self._cards = shuffle_deck(self._cards, self._rng)

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck.

        Args:
            n: Number of cards to deal.

        Returns:
            List of dealt cards.

        Raises:
            DeckExhaustedError: If not enough cards remain.
        """
        if n > len(self._cards):
            raise DeckExhaustedError(n, len(self._cards))
        dealt = self._cards[:n]
        self._cards = self._cards[n:]
        self._dealt.extend(dealt)
        return dealt

    def deal_one(self) -> Card:
        """Deal a single card from the top of the deck."""
        return self.deal(1)[0]

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def dealt(self) -> list[Card]:
        """Cards dealt since the last reset, in deal order."""
        return list(self._dealt)

    def remove(self, cards: list[Card]) -> None:
        """Remove specific cards from the deck (for setting up known boards).

        Args:
            cards: Cards to remove from the deck.

        Raises:
            ValueError: If a card is not in the deck.
        """
        for card in cards:
            if card not in self._cards:
                raise ValueError(f"Card {card} not in deck")
            self._cards.remove(card)
            self._dealt.append(card)
