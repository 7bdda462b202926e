"""
Mahjongg Deal Generator

Handles dealing tiles onto a layout and reshuffling a stuck board.

Two policies are supported:
- "random": shuffle the deck and lay it out; the deal may be unsolvable.
- "solvable": build a removal order on an empty geometry first, then
  put matching pairs on each removed pair of positions. Replaying that
  order clears the board, so at least one full solution exists.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .tiles import Tile, TileSet, bam
from .layout import BoardLayout, Position
from .board import BoardState
from .match import has_matching_pair

logger = logging.getLogger(__name__)


DEAL_POLICIES = ("random", "solvable")

# Face used while simulating removals; exposure does not depend on faces
_PLACEHOLDER = bam(1)


class DealError(RuntimeError):
    """Raised when no solvable arrangement could be built"""


def is_stuck(board: BoardState) -> bool:
    """True if tiles remain but no two exposed tiles match"""
    return not board.is_empty() and not has_matching_pair(board)


@dataclass
class DealGenerator:
    """
    Produces initial boards for a layout.

    Attributes:
        policy: "random" or "solvable"
        seed: Seed of the generator's own random source
        max_attempts: Retries before a solvable construction gives up
        last_solution: Removal order guaranteed to clear the last
                       solvable deal (empty for random deals)
        deals_made: Number of boards dealt so far
    """
    policy: str = "solvable"
    seed: Optional[int] = None
    max_attempts: int = 100
    last_solution: List[Tuple[Position, Position]] = field(default_factory=list)
    deals_made: int = 0

    def __post_init__(self):
        if self.policy not in DEAL_POLICIES:
            raise ValueError(f"Deal policy must be one of {DEAL_POLICIES}, got {self.policy!r}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")
        self.rng = random.Random(self.seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reseed the generator"""
        if seed is not None:
            self.seed = seed
        self.rng = random.Random(self.seed)
        self.last_solution = []
        self.deals_made = 0

    def deal(self, layout: BoardLayout) -> BoardState:
        """
        Deal a fresh board for layout.

        Raises DealError if the solvable policy cannot find a removal
        order within max_attempts.
        """
        deck = TileSet.create_deck(len(layout), self.rng)

        if self.policy == "solvable":
            order = self._removal_order(layout, layout.positions)
            if order is None:
                logger.error(
                    f"Could not build a solvable deal for '{layout.name}' "
                    f"in {self.max_attempts} attempts"
                )
                raise DealError(f"No solvable deal found for layout '{layout.name}'")
            board = self._assign_pairs(layout, order, deck)
            self.last_solution = order
        else:
            board = self._assign_random(layout, layout.positions, deck)
            self.last_solution = []

        self.deals_made += 1
        logger.info(
            f"Dealt {len(layout)} tiles on '{layout.name}' "
            f"(policy={self.policy}, seed={self.seed}, deal #{self.deals_made})"
        )
        return board

    def is_stuck(self, board: BoardState) -> bool:
        """True if tiles remain but no two exposed tiles match"""
        return is_stuck(board)

    def shuffle_remaining(self, board: BoardState) -> BoardState:
        """
        Redeal the tiles still on board over the positions they occupy.

        Under the solvable policy the new arrangement can be cleared
        whenever the remaining geometry allows it; otherwise (and under
        the random policy) a random arrangement with at least one
        available pair is preferred.
        """
        layout = board.layout
        positions = board.occupied_positions()
        deck = board.tiles()

        if self.policy == "solvable" and not deck.can_pair():
            logger.info("Remaining tiles cannot all be paired, reshuffling at random")
        elif self.policy == "solvable":
            order = self._removal_order(layout, positions)
            if order is not None:
                self.last_solution = order
                logger.info(f"Reshuffled {len(positions)} tiles into a solvable arrangement")
                return self._assign_pairs(layout, order, deck)
            logger.info("Remaining geometry has no full solution, reshuffling at random")

        self.last_solution = []
        shuffled = board
        for attempt in range(1, self.max_attempts + 1):
            shuffled = self._assign_random(layout, positions, deck)
            if not is_stuck(shuffled):
                logger.info(f"Reshuffled {len(positions)} tiles at random (attempt {attempt})")
                return shuffled
        logger.info(f"Reshuffled {len(positions)} tiles, but no pair is available")
        return shuffled

    def _removal_order(
        self, layout: BoardLayout, positions: Iterable[Position]
    ) -> Optional[List[Tuple[Position, Position]]]:
        """
        Simulate clearing a board that has tiles on positions, removing
        two random exposed tiles at a time.

        Returns the pairs in removal order, or None if every attempt
        left tiles that could not be paired.
        """
        positions = list(positions)
        for attempt in range(1, self.max_attempts + 1):
            board = BoardState(layout, {p: _PLACEHOLDER for p in positions})
            order = []
            while not board.is_empty():
                exposed = board.exposed_positions()
                if len(exposed) < 2:
                    break
                p1, p2 = self.rng.sample(exposed, 2)
                board.remove(p1)
                board.remove(p2)
                order.append((p1, p2))
            if board.is_empty():
                if attempt > 1:
                    logger.debug(f"Solvable construction succeeded on attempt {attempt}")
                return order
            logger.debug(
                f"Construction attempt {attempt} stranded with {board.occupied_count} tiles"
            )
        return None

    def _assign_pairs(
        self,
        layout: BoardLayout,
        order: List[Tuple[Position, Position]],
        deck: TileSet,
    ) -> BoardState:
        """Put one matching pair of the deck on each pair of positions"""
        pairs = deck.pairs()
        self.rng.shuffle(pairs)
        placement: Dict[Position, Tile] = {}
        for (p1, p2), (t1, t2) in zip(order, pairs):
            if self.rng.random() < 0.5:
                t1, t2 = t2, t1
            placement[p1] = t1
            placement[p2] = t2
        return BoardState(layout, placement)

    def _assign_random(
        self, layout: BoardLayout, positions: Iterable[Position], deck: TileSet
    ) -> BoardState:
        """Lay a shuffled copy of deck on positions"""
        tiles = deck.copy()
        tiles.shuffle(self.rng)
        return BoardState(layout, dict(zip(positions, tiles)))

    def __repr__(self) -> str:
        return f"DealGenerator(policy={self.policy!r}, seed={self.seed})"
