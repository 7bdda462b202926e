"""
Mahjongg Game Configuration

Settings for a game session, plus a few ready-made presets.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from .layout import get_layout
from .deal import DEAL_POLICIES


@dataclass
class GameConfig:
    """
    Configuration of a game session.

    Attributes:
        layout_name: Name of a registered board layout
        deal_policy: "random" or "solvable"
        seed: Seed for reproducible deals (None for a fresh one each run)
        auto_shuffle: Reshuffle the remaining tiles automatically
                      instead of stopping when the board gets stuck
    """

    layout_name: str = "pyramid"
    deal_policy: str = "solvable"
    seed: Optional[int] = None
    auto_shuffle: bool = False

    # External (camelCase) names accepted by from_dict
    _ALIASES = {
        "layoutName": "layout_name",
        "dealPolicy": "deal_policy",
        "autoShuffle": "auto_shuffle",
    }

    def __post_init__(self):
        if self.deal_policy not in DEAL_POLICIES:
            raise ValueError(f"Deal policy must be one of {DEAL_POLICIES}, got {self.deal_policy!r}")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError(f"Seed must be an integer, got {self.seed!r}")
        # Raises LayoutError for unknown names
        get_layout(self.layout_name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'GameConfig':
        """
        Build a config from a mapping such as
        {"layoutName": "pyramid", "dealPolicy": "solvable", "seed": 7}.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = cls._ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown config key: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def __repr__(self) -> str:
        return f"GameConfig({self.layout_name}, {self.deal_policy}, seed={self.seed})"


# Standard game on the 144-tile pyramid
DEFAULT_CONFIG = GameConfig()

# Small two-layer board for quick games
QUICK_CONFIG = GameConfig(layout_name="tower", deal_policy="solvable")

# The single-layer 12 x 8 board with a plain shuffled deal
CLASSIC_2D_CONFIG = GameConfig(layout_name="flat", deal_policy="random")

PRESETS = {
    "default": DEFAULT_CONFIG,
    "quick": QUICK_CONFIG,
    "classic2d": CLASSIC_2D_CONFIG,
}


def preset(name: str, **overrides: Any) -> GameConfig:
    """
    A named preset with some fields replaced.

    Overrides given as None keep the preset's value.
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset {name!r}, expected one of {sorted(PRESETS)}")
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(PRESETS[name], **changes)
