"""Constants for the hold'em simulator."""

from enum import IntEnum, StrEnum


class Suit(StrEnum):
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"
    SPADES = "s"


class Rank(StrEnum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


RANK_VALUES: dict[Rank, int] = {
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 11,
    Rank.QUEEN: 12,
    Rank.KING: 13,
    Rank.ACE: 14,
}


class HandRanking(IntEnum):
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


class HandComparison(StrEnum):
    WIN = "WIN"
    LOSE = "LOSE"
    TIE = "TIE"


class Seat(StrEnum):
    """Stable identity of a seat at the table."""

    HERO = "hero"
    OPPONENT1 = "opponent1"
    OPPONENT2 = "opponent2"
    OPPONENT3 = "opponent3"


class PositionCategory(StrEnum):
    EARLY = "early"
    MIDDLE = "middle"
    LATE = "late"
    BUTTON = "button"


class ActionType(StrEnum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class Street(StrEnum):
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"


class Phase(StrEnum):
    WAITING = "WAITING"
    BETTING = "BETTING"
    SHOWDOWN = "SHOWDOWN"


class ActionPolicy(StrEnum):
    """How the betting engine treats actions that break the betting rules."""

    STRICT = "STRICT"  # Reject with IllegalActionError, state unchanged
    PERMISSIVE = "PERMISSIVE"  # Apply as-is, legacy behaviour
