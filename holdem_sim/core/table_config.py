"""Table configuration.

Holds the knobs a driver needs to set up a table: blinds, starting
stacks, the sampling budget for equity estimates and how strictly the
betting engine polices actions. Can be loaded from a JSON file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from holdem_sim.utils.constants import ActionPolicy

logger = logging.getLogger("holdem_sim.config")

DEFAULT_CONFIG_PATH = Path.home() / ".holdem_sim" / "table_config.json"


@dataclass(frozen=True)
class TableConfig:
    """Configuration for one simulated table."""

    small_blind: float = 0.5
    big_blind: float = 1.0
    starting_stack: float = 100.0
    num_opponents: int = 3
    equity_iterations: int = 1000
    action_policy: ActionPolicy = ActionPolicy.STRICT
    require_full_orbit: bool = False

    def __post_init__(self) -> None:
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.small_blind > self.big_blind:
            raise ValueError(
                f"Small blind {self.small_blind:g} exceeds big blind {self.big_blind:g}"
            )
        if self.starting_stack <= 0:
            raise ValueError("Starting stack must be positive")
        if not 1 <= self.num_opponents <= 3:
            raise ValueError(
                f"num_opponents must be between 1 and 3, got {self.num_opponents}"
            )
        if self.equity_iterations < 1:
            raise ValueError("equity_iterations must be at least 1")

    @property
    def starting_stack_bb(self) -> float:
        return self.starting_stack / self.big_blind


def load_table_config(config_path: Path | None = None) -> TableConfig | None:
    """Load table configuration from a JSON file.

    Default path: ~/.holdem_sim/table_config.json

    Returns None if the file does not exist, or if it cannot be read or
    holds invalid values (a warning is logged), leaving the caller to
    fall back to ``TableConfig()``.

    Expected JSON format (every key optional):
        {
            "small_blind": 0.5,
            "big_blind": 1,
            "starting_stack": 100,
            "num_opponents": 3,
            "equity_iterations": 1000,
            "action_policy": "STRICT",
            "require_full_orbit": false
        }
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return None

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read table config at %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Table config at %s is not a JSON object", path)
        return None

    known = set(TableConfig.__dataclass_fields__)
    for key in sorted(set(data) - known):
        logger.warning("Ignoring unknown table config key: %s", key)

    kwargs = {k: v for k, v in data.items() if k in known}
    try:
        if "action_policy" in kwargs:
            kwargs["action_policy"] = ActionPolicy(str(kwargs["action_policy"]).upper())
        config = TableConfig(**kwargs)
    except (TypeError, ValueError) as e:
        logger.warning("Invalid table config at %s: %s", path, e)
        return None

    logger.debug("Loaded table config from %s: %s", path, config)
    return config
