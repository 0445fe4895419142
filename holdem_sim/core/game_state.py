"""Game state tracking for Texas Hold'em."""

from __future__ import annotations

from dataclasses import dataclass, field

from holdem_sim.utils.card import Card
from holdem_sim.utils.constants import ActionType, Phase, Seat, Street


@dataclass
class PlayerState:
    """State of a single player at the table.

    ``stack`` carries over between hands; everything else is per-hand
    and cleared by ``reset_for_hand``.
    """

    seat: Seat
    stack: float
    name: str = ""
    hole_cards: list[Card] = field(default_factory=list)
    current_bet: float = 0.0
    is_folded: bool = False
    is_all_in: bool = False

    def __post_init__(self) -> None:
        if self.stack < 0:
            raise ValueError(f"Stack cannot be negative, got {self.stack}")
        if not self.name:
            self.name = self.seat.value

    def reset_for_hand(self) -> None:
        """Reset player state for a new hand."""
        self.hole_cards = []
        self.current_bet = 0.0
        self.is_folded = False
        self.is_all_in = False

    @property
    def can_act(self) -> bool:
        """Whether the player still gets turns this hand."""
        return not self.is_folded and not self.is_all_in


@dataclass(frozen=True)
class BetAction:
    """A betting action.

    For RAISE and ALL_IN, ``amount`` is the player's new total
    commitment for the street, not the increment. For CALL it is the
    amount the caller expects to put in; the engine recomputes it.
    """

    action: ActionType
    amount: float = 0.0

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Action amount cannot be negative, got {self.amount}")

    @classmethod
    def fold(cls) -> BetAction:
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> BetAction:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls, amount: float = 0.0) -> BetAction:
        return cls(ActionType.CALL, amount)

    @classmethod
    def raise_to(cls, amount: float) -> BetAction:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def all_in(cls, amount: float = 0.0) -> BetAction:
        return cls(ActionType.ALL_IN, amount)

    def __str__(self) -> str:
        if self.action in (ActionType.FOLD, ActionType.CHECK):
            return self.action.value
        return f"{self.action.value} {self.amount:g}"


@dataclass(frozen=True)
class ActionRecord:
    """One entry of the hand's append-only action log."""

    seat: Seat
    action: ActionType
    amount: float
    street: Street
    timestamp: float


@dataclass
class GameState:
    """Complete state of a Texas Hold'em hand.

    ``pot`` holds chips collected from completed streets only; chips
    wagered on the current street sit in each player's ``current_bet``.
    """

    players: list[PlayerState]
    small_blind: float
    big_blind: float
    street: Street = Street.PREFLOP
    phase: Phase = Phase.WAITING
    pot: float = 0.0
    community_cards: list[Card] = field(default_factory=list)
    acting_index: int = 0
    dealer_index: int = 0
    small_blind_index: int = 0
    big_blind_index: int = 0
    current_bet: float = 0.0
    min_raise: float = 0.0
    action_history: list[ActionRecord] = field(default_factory=list)
    posted_blinds: dict[Seat, float] = field(default_factory=dict)  # Chips each blind actually posted
    hand_number: int = 0

    @property
    def acting_player(self) -> PlayerState:
        return self.players[self.acting_index]

    @property
    def street_bets(self) -> float:
        """Chips wagered on the current street, not yet collected."""
        return sum(p.current_bet for p in self.players)

    @property
    def total_pot(self) -> float:
        """Collected pot plus every outstanding street bet."""
        return self.pot + self.street_bets

    @property
    def active_players(self) -> list[PlayerState]:
        """Players who have not folded."""
        return [p for p in self.players if not p.is_folded]

    @property
    def players_in_hand(self) -> int:
        return len(self.active_players)

    @property
    def is_hand_over(self) -> bool:
        """True once at most one player is left holding cards."""
        return self.players_in_hand <= 1

    def index_of(self, seat: Seat) -> int:
        """Seat index of the player with the given identity."""
        for i, p in enumerate(self.players):
            if p.seat == seat:
                return i
        raise ValueError(f"No player at seat {seat}")

    def player_at(self, seat: Seat) -> PlayerState:
        return self.players[self.index_of(seat)]
