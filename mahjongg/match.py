"""
Mahjongg Match Engine

Decides whether two selected positions form a removable pair and, if so,
removes them. This is the only code path that takes pairs off a board.
"""

import logging
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .tiles import tiles_match
from .layout import Position
from .board import BoardState

logger = logging.getLogger(__name__)


class MatchResult(IntEnum):
    """Outcome of a match attempt"""
    SUCCESS = 0
    FAILURE = 1


@dataclass
class MatchAttempt:
    """
    Result of attempt_match.

    Attributes:
        result: SUCCESS or FAILURE
        positions: The two positions tried
        reason: Why the attempt failed (None on success)
    """
    result: MatchResult
    positions: Tuple[Position, Position]
    reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.result == MatchResult.SUCCESS

    def __repr__(self) -> str:
        return f"MatchAttempt({self.result.name}, {self.positions[0]}, {self.positions[1]})"


def check_pair(board: BoardState, p1: Position, p2: Position) -> Optional[str]:
    """
    Return the reason p1 and p2 cannot be removed together,
    or None if they form a legal pair.

    Raises OutOfBounds for positions that are not on the board.
    """
    t1 = board.occupant(p1)
    t2 = board.occupant(p2)

    if Position(*p1) == Position(*p2):
        return "cannot match a tile with itself"
    if t1 is None or t2 is None:
        return "position already cleared"
    if not board.is_exposed(p1) or not board.is_exposed(p2):
        return "tile is not exposed"
    if not tiles_match(t1, t2):
        return f"{t1} does not match {t2}"
    return None


def attempt_match(board: BoardState, p1: Position, p2: Position) -> MatchAttempt:
    """
    Try to remove the tiles at p1 and p2.

    On success both tiles are removed. On failure the board is left
    untouched and the reason is reported.
    """
    p1, p2 = Position(*p1), Position(*p2)
    reason = check_pair(board, p1, p2)
    if reason is not None:
        logger.debug(f"Match {p1} / {p2} failed: {reason}")
        return MatchAttempt(MatchResult.FAILURE, (p1, p2), reason)

    board.remove(p1)
    board.remove(p2)
    logger.debug(f"Match {p1} / {p2} removed, {board.occupied_count} tiles left")
    return MatchAttempt(MatchResult.SUCCESS, (p1, p2))


def find_matching_pairs(board: BoardState) -> List[Tuple[Position, Position]]:
    """
    All pairs of exposed positions holding matching tiles.

    Pairs are ordered as they appear in layout order.
    """
    exposed = [(p, board.occupant(p)) for p in board.exposed_positions()]
    pairs = []
    for i, (p1, t1) in enumerate(exposed):
        for p2, t2 in exposed[i + 1:]:
            if tiles_match(t1, t2):
                pairs.append((p1, p2))
    return pairs


def has_matching_pair(board: BoardState) -> bool:
    """Check for at least one removable pair, stopping at the first"""
    seen = set()
    for p in board.exposed_positions():
        key = board.occupant(p).match_key
        if key in seen:
            return True
        seen.add(key)
    return False
