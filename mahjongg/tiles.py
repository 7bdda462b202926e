"""
Mahjongg Solitaire Tiles

Defines the 144 tiles of a standard solitaire set:
- 9 Bamboos x4 = 36
- 9 Dots x4 = 36
- 9 Characters x4 = 36
- 4 Winds (East, South, West, North) x4 = 16
- 3 Dragons (Red, Green, White) x4 = 12
- 4 Flowers x1 = 4 (any flower matches any flower)
- 4 Seasons x1 = 4 (any season matches any season)
Total: 144 tiles
"""

import random
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import numpy as np


class TileSuit(IntEnum):
    """Tile suits in a solitaire set"""
    BAMBOO = 0
    DOTS = 1
    CHARACTERS = 2
    WINDS = 3
    DRAGONS = 4
    FLOWERS = 5
    SEASONS = 6


class WindType(IntEnum):
    """Wind tile ranks"""
    EAST = 1
    SOUTH = 2
    WEST = 3
    NORTH = 4


class DragonType(IntEnum):
    """Dragon tile ranks"""
    RED = 1
    GREEN = 2
    WHITE = 3


NUMBERED_SUITS = (TileSuit.BAMBOO, TileSuit.DOTS, TileSuit.CHARACTERS)

# Suits whose members all match each other
WILDCARD_SUITS = (TileSuit.FLOWERS, TileSuit.SEASONS)

# Highest rank per suit (ranks start at 1)
MAX_RANK = {
    TileSuit.BAMBOO: 9,
    TileSuit.DOTS: 9,
    TileSuit.CHARACTERS: 9,
    TileSuit.WINDS: 4,
    TileSuit.DRAGONS: 3,
    TileSuit.FLOWERS: 4,
    TileSuit.SEASONS: 4,
}

# Copies of each distinct tile in the full set
COPIES = {
    TileSuit.BAMBOO: 4,
    TileSuit.DOTS: 4,
    TileSuit.CHARACTERS: 4,
    TileSuit.WINDS: 4,
    TileSuit.DRAGONS: 4,
    TileSuit.FLOWERS: 1,
    TileSuit.SEASONS: 1,
}

_SUIT_CODES = {
    TileSuit.BAMBOO: "b",
    TileSuit.DOTS: "d",
    TileSuit.CHARACTERS: "c",
    TileSuit.FLOWERS: "f",
    TileSuit.SEASONS: "s",
}
_WIND_CODES = {WindType.EAST: "we", WindType.SOUTH: "ws", WindType.WEST: "ww", WindType.NORTH: "wn"}
_DRAGON_CODES = {DragonType.RED: "dr", DragonType.GREEN: "dg", DragonType.WHITE: "dw"}


def _suit_offset(suit: TileSuit) -> int:
    return sum(MAX_RANK[s] for s in TileSuit if s < suit)


@dataclass(frozen=True)
class Tile:
    """
    Represents a single tile face.

    Attributes:
        suit: The suit of the tile
        rank: The rank within the suit (1-9 for numbered suits,
              1-4 for winds, flowers and seasons, 1-3 for dragons)
    """
    suit: TileSuit
    rank: int

    def __post_init__(self):
        """Validate tile rank"""
        object.__setattr__(self, "suit", TileSuit(self.suit))
        object.__setattr__(self, "rank", int(self.rank))
        max_rank = MAX_RANK[self.suit]
        if not 1 <= self.rank <= max_rank:
            raise ValueError(
                f"{self.suit.name} tiles must have rank 1-{max_rank}, got {self.rank}"
            )

    @property
    def is_wildcard(self) -> bool:
        """Check if tile belongs to a suit whose members all match"""
        return self.suit in WILDCARD_SUITS

    @property
    def tile_index(self) -> int:
        """
        Get unique index for this tile face (0-41).
        Used for numpy encodings of boards and decks.
        """
        return _suit_offset(self.suit) + self.rank - 1

    @property
    def match_key(self) -> Tuple[int, int]:
        """Key shared by all tiles that match this one"""
        if self.is_wildcard:
            return (int(self.suit), 0)
        return (int(self.suit), self.rank)

    @property
    def code(self) -> str:
        """Short code used by text front-ends ("b1", "we", "dr", "f3")"""
        if self.suit == TileSuit.WINDS:
            return _WIND_CODES[WindType(self.rank)]
        if self.suit == TileSuit.DRAGONS:
            return _DRAGON_CODES[DragonType(self.rank)]
        return f"{_SUIT_CODES[self.suit]}{self.rank}"

    def matches(self, other: 'Tile') -> bool:
        """Check whether this tile can be removed together with other"""
        return tiles_match(self, other)

    def __lt__(self, other) -> bool:
        """Comparison for sorting"""
        if not isinstance(other, Tile):
            return NotImplemented
        return self.tile_index < other.tile_index

    def __repr__(self) -> str:
        return f"Tile({self.suit.name}, {self.rank})"

    def __str__(self) -> str:
        if self.suit == TileSuit.WINDS:
            return f"{WindType(self.rank).name.title()} Wind"
        if self.suit == TileSuit.DRAGONS:
            return f"{DragonType(self.rank).name.title()} Dragon"
        return f"{self.suit.name.title()} {self.rank}"

    @classmethod
    def from_index(cls, tile_index: int) -> 'Tile':
        """
        Create a tile from its face index (0-41).

        Args:
            tile_index: Tile face index
        """
        if not 0 <= tile_index < TileSet.NUM_TILE_TYPES:
            raise ValueError(f"Tile index out of range: {tile_index}")
        for suit in TileSuit:
            offset = _suit_offset(suit)
            if tile_index < offset + MAX_RANK[suit]:
                return cls(suit, tile_index - offset + 1)
        raise ValueError(f"Tile index out of range: {tile_index}")

    @classmethod
    def from_code(cls, s: str) -> 'Tile':
        """
        Create a tile from its short code.

        Args:
            s: Code like "b1", "d9", "c5", "we", "dr", "f2", "s4"
        """
        s = s.strip().lower()
        for wind_type, code in _WIND_CODES.items():
            if s == code:
                return cls(TileSuit.WINDS, wind_type)
        for dragon_type, code in _DRAGON_CODES.items():
            if s == code:
                return cls(TileSuit.DRAGONS, dragon_type)
        if len(s) == 2 and s[1].isdigit():
            for suit, code in _SUIT_CODES.items():
                if s[0] == code:
                    return cls(suit, int(s[1]))
        raise ValueError(f"Cannot parse tile code: {s}")


def tiles_match(a: Tile, b: Tile) -> bool:
    """
    Two tiles match if suit and rank are identical, or if both belong
    to the same wildcard suit (any flower matches any flower).
    """
    return a.match_key == b.match_key


class TileSet:
    """
    A collection of tiles with utility methods.
    Used to represent decks and the tiles left on a board.
    """

    # Total number of distinct tile faces
    NUM_TILE_TYPES = 42
    # Total tiles in a complete set
    NUM_TILES = 144

    def __init__(self, tiles: Optional[List[Tile]] = None):
        """Initialize tile set with optional list of tiles"""
        self.tiles: List[Tile] = list(tiles) if tiles else []

    def shuffle(self, rng: random.Random) -> None:
        """Shuffle the set in place with the given generator"""
        rng.shuffle(self.tiles)

    def to_count_array(self) -> np.ndarray:
        """
        Convert to a 42-element array counting each tile face.
        """
        counts = np.zeros(self.NUM_TILE_TYPES, dtype=np.int8)
        for tile in self.tiles:
            counts[tile.tile_index] += 1
        return counts

    def can_pair(self) -> bool:
        """Check whether every tile has a matching partner"""
        counts = {}
        for tile in self.tiles:
            counts[tile.match_key] = counts.get(tile.match_key, 0) + 1
        return all(n % 2 == 0 for n in counts.values())

    def pairs(self) -> List[Tuple[Tile, Tile]]:
        """
        Partition the set into matching pairs.

        Raises ValueError if some tile has no partner.
        """
        groups = {}
        for tile in self.tiles:
            groups.setdefault(tile.match_key, []).append(tile)

        result = []
        for key, members in groups.items():
            if len(members) % 2:
                raise ValueError(f"Tile group {key} has an odd number of tiles ({len(members)})")
            for i in range(0, len(members), 2):
                result.append((members[i], members[i + 1]))
        return result

    @classmethod
    def create_full_set(cls) -> 'TileSet':
        """Create a complete set of 144 tiles"""
        tiles = []
        for suit in TileSuit:
            for rank in range(1, MAX_RANK[suit] + 1):
                for _ in range(COPIES[suit]):
                    tiles.append(Tile(suit, rank))
        return cls(tiles)

    @classmethod
    def create_deck(cls, num_tiles: int, rng: Optional[random.Random] = None) -> 'TileSet':
        """
        Create a deck for a board with num_tiles positions.

        A full board gets the complete set. Smaller boards get whole
        matching pairs picked at random from the complete set, so every
        deck can be cleared.

        Args:
            num_tiles: Number of tiles wanted (even, at most 144)
            rng: Random generator used to pick pairs
        """
        if num_tiles % 2 or not 0 < num_tiles <= cls.NUM_TILES:
            raise ValueError(f"Deck size must be even and in 2..{cls.NUM_TILES}, got {num_tiles}")

        full = cls.create_full_set()
        if num_tiles == cls.NUM_TILES:
            return full

        rng = rng or random.Random()
        pairs = full.pairs()
        rng.shuffle(pairs)
        tiles = []
        for a, b in pairs[:num_tiles // 2]:
            tiles.extend((a, b))
        return cls(tiles)

    def copy(self) -> 'TileSet':
        """Create a copy of this tile set"""
        return TileSet(list(self.tiles))

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def __getitem__(self, index):
        return self.tiles[index]

    def __repr__(self) -> str:
        return f"TileSet({len(self.tiles)} tiles)"

    def __str__(self) -> str:
        return " ".join(t.code for t in sorted(self.tiles))


# Convenience functions for creating specific tiles
def bam(rank: int) -> Tile:
    """Create a Bamboo tile (1-9)"""
    return Tile(TileSuit.BAMBOO, rank)

def dot(rank: int) -> Tile:
    """Create a Dots tile (1-9)"""
    return Tile(TileSuit.DOTS, rank)

def char(rank: int) -> Tile:
    """Create a Characters tile (1-9)"""
    return Tile(TileSuit.CHARACTERS, rank)

def wind(wind_type: WindType) -> Tile:
    """Create a Wind tile"""
    return Tile(TileSuit.WINDS, wind_type)

def dragon(dragon_type: DragonType) -> Tile:
    """Create a Dragon tile"""
    return Tile(TileSuit.DRAGONS, dragon_type)

def flower(rank: int) -> Tile:
    """Create a Flower tile (1-4)"""
    return Tile(TileSuit.FLOWERS, rank)

def season(rank: int) -> Tile:
    """Create a Season tile (1-4)"""
    return Tile(TileSuit.SEASONS, rank)


# Named wind tiles
EAST = Tile(TileSuit.WINDS, WindType.EAST)
SOUTH = Tile(TileSuit.WINDS, WindType.SOUTH)
WEST = Tile(TileSuit.WINDS, WindType.WEST)
NORTH = Tile(TileSuit.WINDS, WindType.NORTH)

# Named dragon tiles
RED_DRAGON = Tile(TileSuit.DRAGONS, DragonType.RED)
GREEN_DRAGON = Tile(TileSuit.DRAGONS, DragonType.GREEN)
WHITE_DRAGON = Tile(TileSuit.DRAGONS, DragonType.WHITE)
