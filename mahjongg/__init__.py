"""
Mahjongg Solitaire Engine
Layered tile-matching solitaire (free-tile rule, pairwise removal)
"""

from .tiles import Tile, TileSuit, TileSet, tiles_match
from .layout import BoardLayout, Position, LayoutError, get_layout, register_layout, available_layouts
from .board import BoardState, OutOfBounds, IllegalMove
from .match import MatchResult, MatchAttempt, attempt_match, find_matching_pairs
from .deal import DealGenerator, DealError, is_stuck
from .config import GameConfig
from .session import (
    GameSession,
    SessionState,
    SelectionOutcome,
    SelectionResult,
    BoardSnapshot,
    new_game,
    select,
    restart,
    current_state,
)

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "TileSuit",
    "TileSet",
    "tiles_match",
    "BoardLayout",
    "Position",
    "LayoutError",
    "get_layout",
    "register_layout",
    "available_layouts",
    "BoardState",
    "OutOfBounds",
    "IllegalMove",
    "MatchResult",
    "MatchAttempt",
    "attempt_match",
    "find_matching_pairs",
    "DealGenerator",
    "DealError",
    "is_stuck",
    "GameConfig",
    "GameSession",
    "SessionState",
    "SelectionOutcome",
    "SelectionResult",
    "BoardSnapshot",
    "new_game",
    "select",
    "restart",
    "current_state",
]
