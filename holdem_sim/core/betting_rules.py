"""Betting rules and seat arithmetic.

Pure functions over players and amounts. The betting engine uses them
to move the hand forward; drivers and UIs use the same helpers to
pre-check an action before submitting it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from holdem_sim.core.game_state import PlayerState


@dataclass(frozen=True)
class BlindPositions:
    dealer: int
    small_blind: int
    big_blind: int


@dataclass(frozen=True)
class BetValidation:
    valid: bool
    error: str = ""


def can_check(player: PlayerState, current_bet: float) -> bool:
    """A player may check only when they have matched the current bet."""
    return player.current_bet == current_bet


def call_amount(player: PlayerState, current_bet: float) -> float:
    """Chips needed to call, limited by what the player has left."""
    return max(0.0, min(current_bet - player.current_bet, player.stack))


def calculate_min_raise(
    current_bet: float, last_raise: float, big_blind: float,
) -> float:
    """Smallest legal raise-to: the current bet plus the last raise size,
    never less than one big blind above it."""
    return current_bet + max(last_raise, big_blind)


def validate_bet_amount(
    amount: float,
    player: PlayerState,
    current_bet: float,
    min_raise: float,
) -> BetValidation:
    """Check a raise-to amount against the player's stack and the min raise.

    ``amount`` is the new total commitment for the street. Going all-in
    for less than a full raise is always allowed.
    """
    max_total = player.stack + player.current_bet
    if amount > max_total:
        return BetValidation(False, "Bet exceeds stack size")
    if amount <= current_bet:
        return BetValidation(False, f"Raise must exceed the current bet of {current_bet:g}")
    if amount < min_raise and amount < max_total:
        return BetValidation(False, f"Minimum raise is {min_raise:g}")
    return BetValidation(True)


def is_betting_round_complete(
    players: list[PlayerState], current_bet: float,
) -> bool:
    """Every player who can still act has matched the current bet."""
    return all(p.current_bet == current_bet for p in players if p.can_act)


def next_player_index(players: list[PlayerState], current_index: int) -> int:
    """Next seat (wrapping) that has not folded and is not all-in.

    Returns ``current_index`` unchanged when nobody else can act.
    """
    n = len(players)
    for step in range(1, n + 1):
        idx = (current_index + step) % n
        if players[idx].can_act:
            return idx
    return current_index


def blind_positions(player_count: int, dealer_index: int) -> BlindPositions:
    """Blind seats for a given button.

    Heads-up the dealer posts the small blind; otherwise the two seats
    after the dealer post small and big blind.
    """
    if player_count < 2:
        raise ValueError(f"Need at least 2 players, got {player_count}")
    if player_count == 2:
        return BlindPositions(
            dealer=dealer_index,
            small_blind=dealer_index,
            big_blind=(dealer_index + 1) % player_count,
        )
    return BlindPositions(
        dealer=dealer_index,
        small_blind=(dealer_index + 1) % player_count,
        big_blind=(dealer_index + 2) % player_count,
    )


def first_preflop_player(player_count: int, big_blind_index: int) -> int:
    """Seat that opens the pre-flop betting (after the big blind)."""
    return (big_blind_index + 1) % player_count


def first_postflop_player(player_count: int, dealer_index: int) -> int:
    """Seat that opens post-flop betting; heads-up the dealer acts first."""
    if player_count == 2:
        return dealer_index
    return (dealer_index + 1) % player_count


def total_pot(players: list[PlayerState], collected: float = 0.0) -> float:
    """Collected pot plus every outstanding street bet."""
    return collected + sum(p.current_bet for p in players)


def format_stack_in_bb(stack: float, big_blind: float) -> str:
    """Stack size in big blinds, e.g. "100BB"."""
    return f"{round(stack / big_blind)}BB"


def generate_random_stack(
    min_bb: int = 30,
    max_bb: int = 200,
    big_blind: float = 1.0,
    rng: random.Random | None = None,
) -> float:
    """Random whole number of big blinds in [min_bb, max_bb]."""
    bb_count = (rng or random).randint(min_bb, max_bb)
    return bb_count * big_blind
