"""Run a batch of simulated hands between AI styles and report the results.

Usage:
    python -m holdem_sim.simulation.run_simulations --hands 500 --seed 7
    python -m holdem_sim.simulation.run_simulations --hero-style loose-aggressive
"""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from holdem_sim.core.game_state import PlayerState
from holdem_sim.core.table_config import TableConfig, load_table_config
from holdem_sim.simulation.poker_game import HandRecord, PokerGame
from holdem_sim.strategy.player_styles import (
    PlayerStyle,
    PlayerStyleConfig,
    assign_opponent_styles,
    get_player_style,
)
from holdem_sim.utils.constants import ActionType, Seat, Street

logger = logging.getLogger("holdem_sim.simulation")

_OPPONENT_SEATS = [Seat.OPPONENT1, Seat.OPPONENT2, Seat.OPPONENT3]
_VOLUNTARY = {ActionType.CALL, ActionType.RAISE, ActionType.ALL_IN}
_RAISES = {ActionType.RAISE, ActionType.ALL_IN}


@dataclass
class SeatStats:
    """Running totals for one seat over a session."""

    name: str
    style: str
    hands: int = 0
    hands_won: int = 0
    vpip: int = 0
    pfr: int = 0
    rebuys: int = 0
    profits: list[float] = field(default_factory=list)

    def record(self, seat: Seat, hand: HandRecord) -> None:
        self.hands += 1
        if seat in hand.winners:
            self.hands_won += 1
        self.profits.append(hand.profits.get(seat, 0.0))

        if hand.history is None:
            return
        preflop = [
            a.action for a in hand.history.actions
            if a.seat == seat and a.street == Street.PREFLOP
        ]
        if any(a in _VOLUNTARY for a in preflop):
            self.vpip += 1
        if any(a in _RAISES for a in preflop):
            self.pfr += 1

    @property
    def total_profit(self) -> float:
        return float(np.sum(self.profits)) if self.profits else 0.0

    @property
    def mean_profit(self) -> float:
        return float(np.mean(self.profits)) if self.profits else 0.0

    @property
    def profit_stdev(self) -> float:
        return float(np.std(self.profits)) if self.profits else 0.0

    def pct(self, count: int) -> float:
        return count / self.hands if self.hands else 0.0


def build_table(
    config: TableConfig,
    hero_style: PlayerStyleConfig,
    rng: random.Random,
) -> tuple[list[PlayerState], dict[Seat, PlayerStyleConfig]]:
    """Seat the hero and ``config.num_opponents`` AI players."""
    opponent_styles = assign_opponent_styles(config.num_opponents, rng)
    players = [PlayerState(seat=Seat.HERO, stack=config.starting_stack, name="Hero")]
    styles = {Seat.HERO: hero_style}
    for seat, style in zip(_OPPONENT_SEATS, opponent_styles):
        players.append(PlayerState(seat=seat, stack=config.starting_stack, name=style.name))
        styles[seat] = style
    return players, styles


def run_simulation(
    num_hands: int = 1000,
    config: TableConfig | None = None,
    hero_style: PlayerStyleConfig | None = None,
    seed: int | None = None,
) -> tuple[dict[Seat, SeatStats], list[HandRecord]]:
    """Play ``num_hands`` hands, rebuying busted seats between hands.

    Returns:
        Per-seat statistics and the record of every hand.
    """
    config = config or TableConfig()
    hero_style = hero_style or get_player_style(PlayerStyle.TIGHT_AGGRESSIVE)
    rng = random.Random(seed)

    players, styles = build_table(config, hero_style, rng)
    game = PokerGame(players, styles, config, seed=rng.getrandbits(32))
    stats = {
        p.seat: SeatStats(name=p.name, style=styles[p.seat].style.value)
        for p in players
    }

    records: list[HandRecord] = []
    for _ in range(num_hands):
        for seat in game.rebuy_busted():
            stats[seat].rebuys += 1
        record = game.play_hand()
        records.append(record)
        for seat, seat_stats in stats.items():
            seat_stats.record(seat, record)

    logger.info("Simulated %d hands", num_hands)
    return stats, records


def print_report(
    stats: dict[Seat, SeatStats], records: list[HandRecord], big_blind: float,
) -> None:
    num_hands = len(records)
    pots = np.array([r.pot_size for r in records]) if records else np.zeros(1)
    showdowns = sum(1 for r in records if r.went_to_showdown)

    print("=" * 72)
    print(f"  HOLD'EM SIMULATION: {num_hands} hands")
    print("=" * 72)
    print(f"  Avg pot:          {pots.mean():.1f} ({pots.mean() / big_blind:.1f} BB)")
    print(f"  Biggest pot:      {pots.max():.1f}")
    print(f"  Showdowns:        {showdowns} ({showdowns / max(num_hands, 1):.1%})")
    print()
    print(
        f"  {'Seat':<10} {'Player':<8} {'Style':<17} {'Won':>6} {'VPIP':>6} "
        f"{'PFR':>6} {'Profit':>9} {'BB/100':>8} {'Rebuys':>6}"
    )
    print("-" * 72)
    for seat, s in stats.items():
        bb_per_100 = s.mean_profit / big_blind * 100
        print(
            f"  {seat.value:<10} {s.name:<8} {s.style:<17} "
            f"{s.pct(s.hands_won):>6.1%} {s.pct(s.vpip):>6.1%} {s.pct(s.pfr):>6.1%} "
            f"{s.total_profit:>+9.1f} {bb_per_100:>+8.1f} {s.rebuys:>6}"
        )
    print()

    hero = stats.get(Seat.HERO)
    if hero is not None and hero.profits:
        print(f"  Hero profit/hand: {hero.mean_profit:+.2f} (stdev {hero.profit_stdev:.2f})")
    biggest = max(records, key=lambda r: r.pot_size, default=None)
    if biggest is not None:
        print("-" * 72)
        print(f"  Biggest pot (Hand #{biggest.hand_number})")
        print(f"  Board:   {' '.join(biggest.community_cards) or '(none)'}")
        print(f"  Pot:     {biggest.pot_size:.1f}")
        winners = ", ".join(stats[w].name for w in biggest.winners)
        ranking = (
            f" ({biggest.winning_hand_ranking.name})"
            if biggest.winning_hand_ranking is not None else ""
        )
        print(f"  Winner:  {winners}{ranking}")
        print("  Actions:")
        for line in biggest.actions_summary:
            print(f"    {line}")
    print("=" * 72)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate hold'em hands between AI player styles.",
    )
    parser.add_argument("--hands", type=int, default=1000, help="Hands to play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Table config JSON (default: ~/.holdem_sim/table_config.json)",
    )
    parser.add_argument(
        "--hero-style",
        choices=[s.value for s in PlayerStyle],
        default=PlayerStyle.TIGHT_AGGRESSIVE.value,
        help="Style the hero seat plays",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if args.hands < 1:
        logger.error("--hands must be at least 1, got %d", args.hands)
        return 2

    config = load_table_config(args.config) or TableConfig()
    stats, records = run_simulation(
        num_hands=args.hands,
        config=config,
        hero_style=get_player_style(args.hero_style),
        seed=args.seed,
    )
    print_report(stats, records, config.big_blind)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
