"""
Mahjongg Board Layouts

A layout is the fixed geometric template of a board: the set of slots a
tile can occupy, organized into stacked layers. Layouts are plain data,
described as one text mask per layer ('#' marks a slot), and are checked
for physical stackability when they are loaded.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple
import numpy as np

from .tiles import TileSet

logger = logging.getLogger(__name__)


class LayoutError(ValueError):
    """Raised when a board template is malformed or unknown"""


class Position(NamedTuple):
    """A slot on the board: layer 0 is the table, row 0 the top row"""
    layer: int
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.layer}, {self.row}, {self.col})"


SLOT_CHARS = "#X"


class BoardLayout:
    """
    Geometric template of a board.

    Attributes:
        name: Registry name of the layout
        positions: All slots, bottom layer first, then row, then column
        shape: (layers, rows, cols) of the bounding box
    """

    def __init__(self, name: str, positions: Iterable[Position]):
        self.name = name
        self.positions: Tuple[Position, ...] = tuple(sorted({Position(*p) for p in positions}))
        self._position_set = frozenset(self.positions)
        self._validate()

        self.shape: Tuple[int, int, int] = (
            max(p.layer for p in self.positions) + 1,
            max(p.row for p in self.positions) + 1,
            max(p.col for p in self.positions) + 1,
        )
        self._index: Dict[Position, int] = {p: i for i, p in enumerate(self.positions)}

    @classmethod
    def from_masks(cls, name: str, layers: Sequence[Sequence[str]]) -> 'BoardLayout':
        """
        Build a layout from text masks.

        Args:
            name: Layout name
            layers: One list of row strings per layer, bottom layer first.
                    '#' or 'X' marks a slot; anything else is empty.
        """
        positions = []
        for layer, rows in enumerate(layers):
            for row, line in enumerate(rows):
                for col, ch in enumerate(line):
                    if ch in SLOT_CHARS:
                        positions.append(Position(layer, row, col))
        return cls(name, positions)

    def _validate(self) -> None:
        """Check the layout can be physically stacked and dealt"""
        if not self.positions:
            raise LayoutError(f"Layout '{self.name}' has no positions")

        for p in self.positions:
            if p.layer < 0 or p.row < 0 or p.col < 0:
                raise LayoutError(f"Layout '{self.name}': negative coordinate in {p}")
            if p.layer > 0 and Position(p.layer - 1, p.row, p.col) not in self._position_set:
                raise LayoutError(
                    f"Layout '{self.name}': position {p} has no support on layer {p.layer - 1}"
                )

        if len(self.positions) % 2:
            raise LayoutError(
                f"Layout '{self.name}' has {len(self.positions)} positions; tiles are removed in pairs"
            )
        if len(self.positions) > TileSet.NUM_TILES:
            raise LayoutError(
                f"Layout '{self.name}' has {len(self.positions)} positions, "
                f"more than the {TileSet.NUM_TILES} tiles in a set"
            )

    def is_valid_position(self, p) -> bool:
        """Check whether p is a slot of this layout"""
        return p in self._position_set

    def positions_above(self, p: Position) -> frozenset:
        """Slots resting directly on top of p"""
        above = Position(p.layer + 1, p.row, p.col)
        if above in self._position_set:
            return frozenset((above,))
        return frozenset()

    def horizontal_neighbors(self, p: Position) -> Tuple[Optional[Position], Optional[Position]]:
        """
        Left and right slots on the same layer and row.

        Returns None for a side that is off-board.
        """
        left = Position(p.layer, p.row, p.col - 1)
        right = Position(p.layer, p.row, p.col + 1)
        return (
            left if left in self._position_set else None,
            right if right in self._position_set else None,
        )

    def index_of(self, p: Position) -> int:
        """Flat index of p, used for action and observation encodings"""
        return self._index[p]

    def position_at(self, index: int) -> Position:
        """Inverse of index_of"""
        return self.positions[index]

    @property
    def mask(self) -> np.ndarray:
        """Boolean array of shape `shape`, True where a slot exists"""
        mask = np.zeros(self.shape, dtype=bool)
        for p in self.positions:
            mask[p.layer, p.row, p.col] = True
        return mask

    @property
    def num_layers(self) -> int:
        return self.shape[0]

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, p) -> bool:
        return p in self._position_set

    def __iter__(self):
        return iter(self.positions)

    def __repr__(self) -> str:
        return f"BoardLayout({self.name!r}, {len(self.positions)} positions, {self.num_layers} layers)"


# Built-in layouts

PYRAMID_MASKS = [
    [
        "############",
        "############",
        "############",
        "############",
        "############",
        "############",
        "############",
        "############",
    ],
    [
        "............",
        "...######...",
        "...######...",
        "...######...",
        "...######...",
        "...######...",
        "...######...",
    ],
    [
        "............",
        "............",
        "....###.....",
        "....###.....",
        "....###.....",
        "....###.....",
    ],
]

# Single 12 x 8 layer, the shape of the classic 2D board
FLAT_MASKS = [
    ["############"] * 8,
]

TOWER_MASKS = [
    [
        "####",
        "####",
        "####",
        "####",
    ],
    [
        "....",
        ".##.",
        ".##.",
    ],
]


_LAYOUTS: Dict[str, BoardLayout] = {}


def register_layout(layout: BoardLayout) -> BoardLayout:
    """Make a layout available by name, replacing any previous one"""
    if layout.name in _LAYOUTS:
        logger.debug(f"Replacing layout '{layout.name}'")
    _LAYOUTS[layout.name] = layout
    return layout


def get_layout(name: str) -> BoardLayout:
    """Look up a registered layout"""
    try:
        return _LAYOUTS[name]
    except KeyError:
        raise LayoutError(
            f"Unknown layout '{name}'. Available: {', '.join(available_layouts())}"
        ) from None


def available_layouts() -> List[str]:
    """Names of all registered layouts"""
    return sorted(_LAYOUTS)


PYRAMID = register_layout(BoardLayout.from_masks("pyramid", PYRAMID_MASKS))
FLAT = register_layout(BoardLayout.from_masks("flat", FLAT_MASKS))
TOWER = register_layout(BoardLayout.from_masks("tower", TOWER_MASKS))
