"""
Mahjongg Board State

Live mapping from layout positions to tiles, and the free-tile rule that
decides which tiles can be picked up.
"""

from typing import Dict, Iterable, List, Optional
import numpy as np

from .tiles import Tile, TileSet
from .layout import BoardLayout, Position


class OutOfBounds(IndexError):
    """Raised when a position is not a slot of the board's layout"""


class IllegalMove(ValueError):
    """Raised when a tile is removed or placed against the rules"""


class BoardState:
    """
    Tiles currently on the board.

    A position is exposed (free) when it holds a tile, nothing rests on
    top of it, and at least one of its left/right neighbours is empty or
    off-board.

    Attributes:
        layout: Geometry of the board
    """

    def __init__(self, layout: BoardLayout, tiles: Optional[Dict[Position, Tile]] = None):
        self.layout = layout
        self._tiles: Dict[Position, Tile] = {}
        if tiles:
            # Bottom layer first so every tile lands on its support
            for p in sorted(tiles):
                self.place(Position(*p), tiles[p])

    def _check(self, p) -> Position:
        if not self.layout.is_valid_position(p):
            raise OutOfBounds(f"Position {p} is not on layout '{self.layout.name}'")
        return Position(*p)

    def occupant(self, p: Position) -> Optional[Tile]:
        """Tile at p, or None if the slot is empty"""
        return self._tiles.get(self._check(p))

    def is_covered(self, p: Position) -> bool:
        """Check whether a tile rests on top of p"""
        p = self._check(p)
        return any(q in self._tiles for q in self.layout.positions_above(p))

    def is_exposed(self, p: Position) -> bool:
        """Check whether the tile at p can be selected"""
        p = self._check(p)
        if p not in self._tiles:
            return False
        if any(q in self._tiles for q in self.layout.positions_above(p)):
            return False
        left, right = self.layout.horizontal_neighbors(p)
        return left not in self._tiles or right not in self._tiles

    def remove(self, p: Position) -> Tile:
        """
        Take the tile off position p.

        Raises IllegalMove if p is empty or not exposed.
        """
        p = self._check(p)
        if p not in self._tiles:
            raise IllegalMove(f"Position {p} is empty")
        if not self.is_exposed(p):
            raise IllegalMove(f"Tile at {p} is not exposed")
        return self._tiles.pop(p)

    def place(self, p: Position, tile: Tile) -> None:
        """
        Put a tile on an empty, supported position.

        Used when dealing and when undoing a removal.
        """
        p = self._check(p)
        if p in self._tiles:
            raise IllegalMove(f"Position {p} is already occupied by {self._tiles[p]!r}")
        if p.layer > 0 and Position(p.layer - 1, p.row, p.col) not in self._tiles:
            raise IllegalMove(f"Position {p} has no tile beneath it")
        self._tiles[p] = tile

    def is_empty(self) -> bool:
        """True once every tile has been removed"""
        return not self._tiles

    @property
    def occupied_count(self) -> int:
        return len(self._tiles)

    def occupied_positions(self) -> List[Position]:
        """Occupied positions in layout order"""
        return [p for p in self.layout.positions if p in self._tiles]

    def exposed_positions(self) -> List[Position]:
        """Positions whose tiles can currently be selected"""
        return [p for p in self.occupied_positions() if self.is_exposed(p)]

    def tiles(self) -> TileSet:
        """Tiles still on the board"""
        return TileSet([self._tiles[p] for p in self.occupied_positions()])

    def items(self) -> Iterable:
        return ((p, self._tiles[p]) for p in self.occupied_positions())

    def to_index_grid(self) -> np.ndarray:
        """
        Array of shape layout.shape holding each tile's face index,
        -1 where there is no tile.
        """
        grid = np.full(self.layout.shape, -1, dtype=np.int8)
        for p, tile in self._tiles.items():
            grid[p.layer, p.row, p.col] = tile.tile_index
        return grid

    def exposed_mask(self) -> np.ndarray:
        """Boolean array of shape layout.shape, True on exposed tiles"""
        mask = np.zeros(self.layout.shape, dtype=bool)
        for p in self.exposed_positions():
            mask[p.layer, p.row, p.col] = True
        return mask

    def copy(self) -> 'BoardState':
        """Create a copy of this board sharing the same layout"""
        new_board = BoardState.__new__(BoardState)
        new_board.layout = self.layout
        new_board._tiles = dict(self._tiles)
        return new_board

    def __len__(self) -> int:
        return len(self._tiles)

    def __repr__(self) -> str:
        return f"BoardState({self.layout.name!r}, {len(self._tiles)}/{len(self.layout)} tiles)"

    def __str__(self) -> str:
        """Text rendering, one block per layer, '..' for empty slots"""
        layers, rows, cols = self.layout.shape
        blocks = []
        for layer in range(layers):
            lines = [f"Layer {layer}:"]
            for row in range(rows):
                cells = []
                for col in range(cols):
                    p = Position(layer, row, col)
                    if p in self._tiles:
                        cells.append(f"{self._tiles[p].code:>2}")
                    elif p in self.layout:
                        cells.append("..")
                    else:
                        cells.append("  ")
                lines.append(" ".join(cells).rstrip())
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)
