"""Texas Hold'em hand evaluation engine.

Checks each ranking from royal flush down to high card and returns the
first one the cards make. Every check picks the highest qualifying
combination, so the result is the best 5-card hand in the set.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from functools import total_ordering

from holdem_sim.core.errors import InsufficientCardsError
from holdem_sim.utils.card import Card, sort_by_rank
from holdem_sim.utils.constants import (
    RANK_VALUES,
    HandComparison,
    HandRanking,
    Rank,
    Suit,
)

_WHEEL_VALUES = (14, 5, 4, 3, 2)


@total_ordering
@dataclass(frozen=True, eq=False)
class HandEvaluation:
    """Result of evaluating a poker hand.

    ``best_five_cards`` is ordered most-significant first, so two
    evaluations of the same ranking compare card by card.
    """

    ranking: HandRanking
    best_five_cards: tuple[Card, ...]
    description: str

    @property
    def rank_values(self) -> tuple[int, ...]:
        return tuple(c.value for c in self.best_five_cards)

    def _key(self) -> tuple[int, tuple[int, ...]]:
        return (int(self.ranking), self.rank_values)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HandEvaluation):
            return NotImplemented
        return self._key() < other._key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandEvaluation):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        cards = " ".join(str(c) for c in self.best_five_cards)
        return f"{self.description} [{cards}]"


def compare_hands(a: HandEvaluation, b: HandEvaluation) -> HandComparison:
    """Compare two evaluations from the point of view of ``a``.

    Rankings are compared first; equal rankings are decided by comparing
    the five selected cards position by position.
    """
    if a.ranking != b.ranking:
        return HandComparison.WIN if a.ranking > b.ranking else HandComparison.LOSE
    for x, y in zip(a.rank_values, b.rank_values):
        if x != y:
            return HandComparison.WIN if x > y else HandComparison.LOSE
    return HandComparison.TIE


def _name(rank: Rank) -> str:
    return rank.value


class HandEvaluator:
    """Evaluates poker hands and determines the best 5-card combination."""

    @staticmethod
    def evaluate(cards: list[Card]) -> HandEvaluation:
        """Evaluate the best 5-card hand from a list of cards.

        Args:
            cards: 5 to 7 cards (hole cards + community cards).

        Returns:
            HandEvaluation with the ranking, the five cards that make it
            and a readable description.

        Raises:
            InsufficientCardsError: If fewer than 5 cards are provided.
            ValueError: If the same card appears twice.
        """
        if len(cards) < 5:
            raise InsufficientCardsError(len(cards))
        if len(set(cards)) != len(cards):
            raise ValueError("Duplicate cards in hand")

        cards = sort_by_rank(list(cards))
        rank_counts = Counter(c.rank for c in cards)

        for check in (
            HandEvaluator._straight_flush,
            HandEvaluator._four_of_a_kind,
            HandEvaluator._full_house,
            HandEvaluator._flush,
            HandEvaluator._straight,
            HandEvaluator._three_of_a_kind,
            HandEvaluator._two_pair,
            HandEvaluator._one_pair,
        ):
            result = check(cards, rank_counts)
            if result is not None:
                return result

        best = tuple(cards[:5])
        return HandEvaluation(
            ranking=HandRanking.HIGH_CARD,
            best_five_cards=best,
            description=f"High Card, {_name(best[0].rank)}",
        )

    # ------------------------------------------------------------------
    # Straights and flushes
    # ------------------------------------------------------------------

    @staticmethod
    def _straight_cards(cards: list[Card]) -> list[Card] | None:
        """Return the highest straight in ``cards`` (most significant first).

        The wheel (A-2-3-4-5) is a 5-high straight and is only returned
        when no higher straight exists.
        """
        by_value: dict[int, Card] = {}
        for card in sort_by_rank(cards):
            by_value.setdefault(card.value, card)

        for high in range(14, 5, -1):
            run = range(high, high - 5, -1)
            if all(v in by_value for v in run):
                return [by_value[v] for v in run]

        if all(v in by_value for v in _WHEEL_VALUES):
            return [by_value[v] for v in (5, 4, 3, 2, 14)]
        return None

    @staticmethod
    def _straight_flush(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        best: list[Card] | None = None
        for suit in Suit:
            suited = [c for c in cards if c.suit == suit]
            if len(suited) < 5:
                continue
            straight = HandEvaluator._straight_cards(suited)
            if straight is None:
                continue
            if best is None or straight[0].value > best[0].value:
                best = straight
        if best is None:
            return None

        if best[0].rank == Rank.ACE:
            return HandEvaluation(
                ranking=HandRanking.ROYAL_FLUSH,
                best_five_cards=tuple(best),
                description="Royal Flush",
            )
        return HandEvaluation(
            ranking=HandRanking.STRAIGHT_FLUSH,
            best_five_cards=tuple(best),
            description=f"Straight Flush, {_name(best[0].rank)} high",
        )

    @staticmethod
    def _flush(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        best: list[Card] | None = None
        for suit in Suit:
            suited = [c for c in cards if c.suit == suit]
            if len(suited) < 5:
                continue
            top = sort_by_rank(suited)[:5]
            if best is None or [c.value for c in top] > [c.value for c in best]:
                best = top
        if best is None:
            return None
        return HandEvaluation(
            ranking=HandRanking.FLUSH,
            best_five_cards=tuple(best),
            description=f"Flush, {_name(best[0].rank)} high",
        )

    @staticmethod
    def _straight(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        straight = HandEvaluator._straight_cards(cards)
        if straight is None:
            return None
        description = f"Straight, {_name(straight[0].rank)} high"
        if straight[-1].rank == Rank.ACE:
            description += " (Wheel)"
        return HandEvaluation(
            ranking=HandRanking.STRAIGHT,
            best_five_cards=tuple(straight),
            description=description,
        )

    # ------------------------------------------------------------------
    # Rank groups
    # ------------------------------------------------------------------

    @staticmethod
    def _ranks_with(rank_counts: Counter[Rank], min_count: int) -> list[Rank]:
        """Ranks appearing at least ``min_count`` times, highest first."""
        ranks = [r for r, c in rank_counts.items() if c >= min_count]
        ranks.sort(key=lambda r: RANK_VALUES[r], reverse=True)
        return ranks

    @staticmethod
    def _with_kickers(
        cards: list[Card], made: list[Card],
    ) -> tuple[Card, ...]:
        """Fill ``made`` up to five cards with the highest remaining cards."""
        rest = [c for c in cards if c not in made]
        return tuple(made + rest[: 5 - len(made)])

    @staticmethod
    def _four_of_a_kind(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        quads = HandEvaluator._ranks_with(rank_counts, 4)
        if not quads:
            return None
        rank = quads[0]
        made = [c for c in cards if c.rank == rank]
        return HandEvaluation(
            ranking=HandRanking.FOUR_OF_A_KIND,
            best_five_cards=HandEvaluator._with_kickers(cards, made),
            description=f"Four of a Kind, {_name(rank)}s",
        )

    @staticmethod
    def _full_house(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        trips = HandEvaluator._ranks_with(rank_counts, 3)
        if not trips:
            return None
        three_rank = trips[0]
        # A second set of trips counts as the pair
        pairs = [r for r in HandEvaluator._ranks_with(rank_counts, 2) if r != three_rank]
        if not pairs:
            return None
        pair_rank = pairs[0]
        made = (
            [c for c in cards if c.rank == three_rank][:3]
            + [c for c in cards if c.rank == pair_rank][:2]
        )
        return HandEvaluation(
            ranking=HandRanking.FULL_HOUSE,
            best_five_cards=tuple(made),
            description=f"Full House, {_name(three_rank)}s over {_name(pair_rank)}s",
        )

    @staticmethod
    def _three_of_a_kind(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        trips = HandEvaluator._ranks_with(rank_counts, 3)
        if not trips:
            return None
        rank = trips[0]
        made = [c for c in cards if c.rank == rank][:3]
        return HandEvaluation(
            ranking=HandRanking.THREE_OF_A_KIND,
            best_five_cards=HandEvaluator._with_kickers(cards, made),
            description=f"Three of a Kind, {_name(rank)}s",
        )

    @staticmethod
    def _two_pair(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        pairs = HandEvaluator._ranks_with(rank_counts, 2)
        if len(pairs) < 2:
            return None
        high, low = pairs[0], pairs[1]
        made = (
            [c for c in cards if c.rank == high][:2]
            + [c for c in cards if c.rank == low][:2]
        )
        return HandEvaluation(
            ranking=HandRanking.TWO_PAIR,
            best_five_cards=HandEvaluator._with_kickers(cards, made),
            description=f"Two Pair, {_name(high)}s and {_name(low)}s",
        )

    @staticmethod
    def _one_pair(
        cards: list[Card], rank_counts: Counter[Rank],
    ) -> HandEvaluation | None:
        pairs = HandEvaluator._ranks_with(rank_counts, 2)
        if not pairs:
            return None
        rank = pairs[0]
        made = [c for c in cards if c.rank == rank][:2]
        return HandEvaluation(
            ranking=HandRanking.ONE_PAIR,
            best_five_cards=HandEvaluator._with_kickers(cards, made),
            description=f"Pair of {_name(rank)}s",
        )
