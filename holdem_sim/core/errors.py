"""Error types raised by the hold'em engine.

All errors derive from ValueError so callers that only care about
"bad input" can keep catching ValueError.
"""

from __future__ import annotations


class HoldemError(ValueError):
    """Base class for engine errors."""


class InsufficientCardsError(HoldemError):
    """Hand evaluation was requested with fewer than 5 cards."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Need at least 5 cards, got {count}")
        self.count = count


class DeckExhaustedError(HoldemError):
    """More cards were requested than remain in the deck."""

    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(
            f"Cannot deal {requested} cards, only {remaining} remaining"
        )
        self.requested = requested
        self.remaining = remaining


class IllegalActionError(HoldemError):
    """An action that breaks the betting rules was submitted.

    Raised before any mutation, so the game state is unchanged.
    """
