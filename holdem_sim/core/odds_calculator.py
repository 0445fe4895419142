"""Pot odds, Monte Carlo equity and out counting for Texas Hold'em.

All percentages are on a 0-100 scale and rounded half-up to one decimal,
matching what the table display and the AI thresholds expect.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from holdem_sim.core.errors import DeckExhaustedError
from holdem_sim.core.hand_evaluator import HandEvaluator
from holdem_sim.utils.card import Card, create_deck
from holdem_sim.utils.constants import Rank, Suit

logger = logging.getLogger("holdem_sim.odds")

DEFAULT_ITERATIONS = 1000

# Typical draw sizes, in outs
COMMON_OUTS: dict[str, int] = {
    "gutshot": 4,
    "open_ended": 8,
    "flush_draw": 9,
    "straight_and_flush_draw": 15,
    "overcard": 6,
    "pair_to_trips": 2,
    "pair_to_set": 2,
    "two_overcards": 6,
}

# Aces are never used as filler: they would count in the wheel
_FILLER_RANKS = [r for r in Rank if r != Rank.ACE]
_FILLER_SUITS = [Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES]


def _round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


@dataclass
class EquityResult:
    """Result of an equity calculation."""

    equity: float  # Percentage [0, 100], rounded to 1 decimal
    win_count: int
    tie_count: int
    loss_count: int
    simulations: int

    @property
    def win_pct(self) -> float:
        return (self.win_count / self.simulations) * 100 if self.simulations else 0.0

    @property
    def tie_pct(self) -> float:
        return (self.tie_count / self.simulations) * 100 if self.simulations else 0.0

    def __str__(self) -> str:
        return (
            f"Equity: {self.equity:.1f}% "
            f"(W: {self.win_count}, T: {self.tie_count}, L: {self.loss_count}, "
            f"sims: {self.simulations})"
        )


def _unseen_cards(known: list[Card]) -> list[Card]:
    """All cards of a fresh deck that are not in ``known``."""
    known_set = set(known)
    return [c for c in create_deck() if c not in known_set]


def _filler_cards(count: int, in_play: list[Card]) -> list[Card]:
    """Neutral cards used to pad a hand up to five cards.

    Fillers never share a rank with a card in play (no pairs), never
    share a suit with each other (no flushes) and the lowest and highest
    picks are at least five ranks apart (no straights).
    """
    if count <= 0:
        return []
    used = {c.rank for c in in_play}
    free = [r for r in _FILLER_RANKS if r not in used]
    ranks = [free[0], free[-1], *free[1:]][:count]
    return [
        Card(rank=rank, suit=_FILLER_SUITS[i % len(_FILLER_SUITS)])
        for i, rank in enumerate(ranks)
    ]


class OddsCalculator:
    """Pot odds, equity and outs.

    Usage:
        OddsCalculator.pot_odds(100, 50)            # 33.3
        OddsCalculator.equity(hero, board, 3)       # e.g. 41.7
        OddsCalculator.outs(hero, board)            # e.g. 9
    """

    @staticmethod
    def pot_odds(pot: float, call_amount: float) -> float:
        """Share of the final pot the caller must put in, as a percentage.

        A free call (``call_amount == 0``) returns 100.
        """
        if call_amount == 0:
            return 100.0
        return _round1(call_amount / (pot + call_amount) * 100)

    @staticmethod
    def implied_odds(
        pot: float, call_amount: float, estimated_future_bets: float,
    ) -> float:
        """Pot odds counting bets expected to be won on later streets."""
        return OddsCalculator.pot_odds(pot + estimated_future_bets, call_amount)

    @staticmethod
    def equity_result(
        hero_cards: list[Card],
        community_cards: list[Card],
        num_opponents: int = 1,
        iterations: int = DEFAULT_ITERATIONS,
        seed: int | None = None,
    ) -> EquityResult:
        """Estimate hero's equity against random hands by Monte Carlo.

        Each iteration shuffles the unseen cards, completes the board to
        five cards, deals two cards to every opponent and scores the hero:
        a win is full credit, a tie with the best opponent half credit.

        Args:
            hero_cards: Hero's 2 hole cards.
            community_cards: Board cards already dealt (0-5).
            num_opponents: Number of random opponent hands.
            iterations: Number of simulated runouts.
            seed: Optional seed for reproducible sampling.

        Returns:
            EquityResult with the percentage and the raw tallies.

        Raises:
            ValueError: On malformed input.
            DeckExhaustedError: If the unseen cards cannot cover the
                runout plus every opponent's hand.
        """
        if len(hero_cards) != 2:
            raise ValueError(f"Hero needs 2 hole cards, got {len(hero_cards)}")
        if len(community_cards) > 5:
            raise ValueError(
                f"At most 5 community cards, got {len(community_cards)}"
            )
        if num_opponents < 1:
            raise ValueError("Need at least one opponent")
        if iterations < 1:
            raise ValueError("Need at least one iteration")

        known = list(hero_cards) + list(community_cards)
        if len(set(known)) != len(known):
            raise ValueError("Duplicate cards between hero and board")

        available = _unseen_cards(known)
        missing = 5 - len(community_cards)
        needed = missing + 2 * num_opponents
        if needed > len(available):
            raise DeckExhaustedError(needed, len(available))

        rng = np.random.default_rng(seed)
        wins = ties = losses = 0

        for _ in range(iterations):
            order = rng.permutation(len(available))[:needed]
            drawn = [available[i] for i in order]
            board = list(community_cards) + drawn[:missing]

            hero_eval = HandEvaluator.evaluate(list(hero_cards) + board)
            best_opponent = max(
                HandEvaluator.evaluate(drawn[missing + 2 * j: missing + 2 * j + 2] + board)
                for j in range(num_opponents)
            )

            if hero_eval > best_opponent:
                wins += 1
            elif hero_eval == best_opponent:
                ties += 1
            else:
                losses += 1

        equity = _round1((wins + 0.5 * ties) / iterations * 100)
        logger.debug(
            "Equity %s vs %d opponent(s) on [%s]: %.1f%% (%d sims)",
            " ".join(str(c) for c in hero_cards),
            num_opponents,
            " ".join(str(c) for c in community_cards),
            equity,
            iterations,
        )
        return EquityResult(
            equity=equity,
            win_count=wins,
            tie_count=ties,
            loss_count=losses,
            simulations=iterations,
        )

    @staticmethod
    def equity(
        hero_cards: list[Card],
        community_cards: list[Card],
        num_opponents: int = 1,
        iterations: int = DEFAULT_ITERATIONS,
        seed: int | None = None,
    ) -> float:
        """Estimated equity as a percentage (see ``equity_result``)."""
        return OddsCalculator.equity_result(
            hero_cards, community_cards, num_opponents, iterations, seed,
        ).equity

    @staticmethod
    def outs(hero_cards: list[Card], community_cards: list[Card]) -> int:
        """Count unseen cards that would raise the hand's ranking.

        Every unseen card is added to the board in turn; it is an out if
        the resulting best hand has a strictly higher ranking than the
        current one. Hands short of five cards (pre-flop) are padded with
        neutral filler cards. Returns 0 once the board is complete.
        """
        if len(community_cards) >= 5:
            return 0

        known = list(hero_cards) + list(community_cards)
        current_cards = known + _filler_cards(5 - len(known), known)
        current = HandEvaluator.evaluate(current_cards)

        outs = 0
        for card in _unseen_cards(known):
            candidate = known + [card]
            candidate += _filler_cards(5 - len(candidate), candidate)
            if HandEvaluator.evaluate(candidate).ranking > current.ranking:
                outs += 1
        return outs

    @staticmethod
    def expected_value(
        pot: float, call_amount: float, equity_percent: float,
    ) -> float:
        """EV of calling: equity share of the final pot minus the call."""
        ev = equity_percent / 100 * (pot + call_amount) - call_amount
        return round(ev, 2)

    @staticmethod
    def hit_probability(outs: int, cards_to_come: int) -> float:
        """Chance of hitting one of ``outs`` with 1 or 2 cards to come.

        One card uses the rule of 2 (capped at 100); two cards use the
        exact ``1 - (47-outs)/47 * (46-outs)/46``.

        Raises:
            ValueError: If cards_to_come is not 1 or 2.
        """
        if cards_to_come == 1:
            return float(min(outs * 2, 100))
        if cards_to_come == 2:
            miss = ((47 - outs) / 47) * ((46 - outs) / 46)
            return _round1((1 - miss) * 100)
        raise ValueError(f"cards_to_come must be 1 or 2, got {cards_to_come}")

    @staticmethod
    def is_profitable_call(pot_odds: float, equity: float) -> bool:
        return equity > pot_odds

    @staticmethod
    def odds_to_percentage(odds: str) -> float:
        """Convert "X:Y" odds against to a percentage, e.g. "2:1" -> 33.3."""
        try:
            numerator, denominator = (float(p) for p in odds.split(":"))
        except ValueError:
            raise ValueError(f"Odds must look like 'X:Y', got '{odds}'")
        if not denominator:
            return 0.0
        return _round1(denominator / (numerator + denominator) * 100)

    @staticmethod
    def percentage_to_odds(percentage: float) -> str:
        """Convert a percentage to simplified "X:Y" odds, e.g. 25 -> "3:1"."""
        if percentage == 0:
            return "inf:1"
        if percentage == 100:
            return "1:0"
        against = round(100 - percentage)
        for_ = round(percentage)
        divisor = math.gcd(against, for_) or 1
        return f"{against // divisor}:{for_ // divisor}"

    @staticmethod
    def estimated_outs(situation: str) -> int:
        """Look up the usual out count for a named draw."""
        try:
            return COMMON_OUTS[situation]
        except KeyError:
            raise ValueError(f"Unknown draw situation: '{situation}'")
