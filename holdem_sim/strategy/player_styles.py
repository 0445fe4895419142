"""AI opponent style profiles."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import StrEnum


class PlayerStyle(StrEnum):
    TIGHT_AGGRESSIVE = "tight-aggressive"
    LOOSE_PASSIVE = "loose-passive"
    LOOSE_AGGRESSIVE = "loose-aggressive"
    TIGHT_PASSIVE = "tight-passive"
    ULTRA_AGGRESSIVE = "ultra-aggressive"


@dataclass(frozen=True)
class PlayerStyleConfig:
    """Immutable tendencies of one AI seat.

    vpip and pfr are percentages of hands played and raised pre-flop,
    aggression is on a 0-10 scale and bluff_frequency is a probability.
    """

    name: str
    style: PlayerStyle
    vpip: float
    pfr: float
    aggression: float
    bluff_frequency: float

    def __post_init__(self) -> None:
        if not 0 <= self.vpip <= 100:
            raise ValueError(f"vpip must be in [0, 100], got {self.vpip}")
        if not 0 <= self.pfr <= 100:
            raise ValueError(f"pfr must be in [0, 100], got {self.pfr}")
        if not 0 <= self.aggression <= 10:
            raise ValueError(f"aggression must be in [0, 10], got {self.aggression}")
        if not 0 <= self.bluff_frequency <= 1:
            raise ValueError(
                f"bluff_frequency must be in [0, 1], got {self.bluff_frequency}"
            )


PLAYER_STYLES: dict[PlayerStyle, PlayerStyleConfig] = {
    PlayerStyle.TIGHT_AGGRESSIVE: PlayerStyleConfig(
        name="Sharky",
        style=PlayerStyle.TIGHT_AGGRESSIVE,
        vpip=20,
        pfr=18,
        aggression=7,
        bluff_frequency=0.25,
    ),
    PlayerStyle.LOOSE_PASSIVE: PlayerStyleConfig(
        name="Fishy",
        style=PlayerStyle.LOOSE_PASSIVE,
        vpip=45,
        pfr=10,
        aggression=2,
        bluff_frequency=0.05,
    ),
    PlayerStyle.LOOSE_AGGRESSIVE: PlayerStyleConfig(
        name="Donkey",
        style=PlayerStyle.LOOSE_AGGRESSIVE,
        vpip=50,
        pfr=35,
        aggression=8,
        bluff_frequency=0.4,
    ),
    PlayerStyle.TIGHT_PASSIVE: PlayerStyleConfig(
        name="Grinder",
        style=PlayerStyle.TIGHT_PASSIVE,
        vpip=15,
        pfr=8,
        aggression=3,
        bluff_frequency=0.1,
    ),
    PlayerStyle.ULTRA_AGGRESSIVE: PlayerStyleConfig(
        name="Maniac",
        style=PlayerStyle.ULTRA_AGGRESSIVE,
        vpip=65,
        pfr=50,
        aggression=10,
        bluff_frequency=0.5,
    ),
}


def get_player_style(style: PlayerStyle | str) -> PlayerStyleConfig:
    """Look up a preset by style id, e.g. "tight-aggressive"."""
    try:
        return PLAYER_STYLES[PlayerStyle(style)]
    except ValueError:
        raise ValueError(f"Unknown player style: '{style}'")


def get_player_style_by_name(name: str) -> PlayerStyleConfig | None:
    """Look up a preset by display name, e.g. "Sharky"."""
    for config in PLAYER_STYLES.values():
        if config.name == name:
            return config
    return None


def random_player_style(
    exclude: list[PlayerStyle] | None = None,
    rng: random.Random | None = None,
) -> PlayerStyleConfig:
    """Pick a random preset, avoiding ``exclude`` unless nothing is left."""
    rng = rng or random.Random()
    excluded = set(exclude or [])
    available = [c for s, c in PLAYER_STYLES.items() if s not in excluded]
    if not available:
        available = list(PLAYER_STYLES.values())
    return rng.choice(available)


def assign_opponent_styles(
    count: int = 3, rng: random.Random | None = None,
) -> list[PlayerStyleConfig]:
    """Pick ``count`` distinct presets for the AI seats."""
    if not 0 <= count <= len(PLAYER_STYLES):
        raise ValueError(
            f"Can assign between 0 and {len(PLAYER_STYLES)} styles, got {count}"
        )
    rng = rng or random.Random()
    return rng.sample(list(PLAYER_STYLES.values()), count)
