"""
Depth-first solver for Mahjongg boards.

Used to check that deals can be cleared and to suggest moves. The tiles
on a board never move, so the set of occupied positions identifies a
search state; states already known to be dead ends are skipped.
"""

import logging
from typing import List, Optional, Tuple

from .layout import Position
from .board import BoardState
from .match import attempt_match, find_matching_pairs

logger = logging.getLogger(__name__)


class SolverLimitReached(RuntimeError):
    """Raised when the search exceeds its node budget"""


def _ordered_pairs(board: BoardState) -> List[Tuple[Position, Position]]:
    # Higher tiles first: they cover the most other tiles
    return sorted(
        find_matching_pairs(board),
        key=lambda pair: -(pair[0].layer + pair[1].layer),
    )


def solve(board: BoardState, node_limit: int = 200_000) -> Optional[List[Tuple[Position, Position]]]:
    """
    Find a sequence of pairs that clears the board.

    The board passed in is not modified.

    Returns:
        The removal sequence, or None if the board cannot be cleared.

    Raises:
        SolverLimitReached: if more than node_limit states were expanded
    """
    work = board.copy()
    dead = set()
    path: List[Tuple[Position, Position]] = []
    nodes = 0

    def search() -> bool:
        nonlocal nodes
        if work.is_empty():
            return True

        state = frozenset(work.occupied_positions())
        if state in dead:
            return False
        nodes += 1
        if nodes > node_limit:
            raise SolverLimitReached(f"Solver gave up after {node_limit} states")

        for p1, p2 in _ordered_pairs(work):
            t1, t2 = work.occupant(p1), work.occupant(p2)
            attempt_match(work, p1, p2)
            path.append((p1, p2))
            if search():
                return True
            path.pop()
            work.place(p1, t1)
            work.place(p2, t2)

        dead.add(state)
        return False

    solved = search()
    logger.debug(f"Solver expanded {nodes} states, solved={solved}")
    return list(path) if solved else None


def is_solvable(board: BoardState, node_limit: int = 200_000) -> bool:
    """Check whether the board can be cleared"""
    return solve(board, node_limit) is not None
