"""
Heuristic Agent for Mahjongg Solitaire

A rule-based agent that picks among the removable pairs.
Much stronger than random, provides a good baseline.

Features:
- Never takes a pair that leaves the board stuck when another pair exists
- Prefers clearing a whole tile group (no partner is stranded)
- Prefers pairs that free the most tiles, then higher layers
"""

import sys
from pathlib import Path
from typing import Dict, Optional, Tuple
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjongg.tiles import Tile
from mahjongg.layout import BoardLayout, Position
from mahjongg.board import BoardState
from mahjongg.match import attempt_match, find_matching_pairs
from mahjongg.deal import is_stuck
from mahjongg.session import GameSession, SessionState


class HeuristicAgent:
    """
    Heuristic-based solitaire agent.

    Scores every removable pair by a one-move lookahead and plays the
    best one, two selections at a time.
    """

    # Score weights
    STUCK_PENALTY = 1000.0
    GROUP_CLEAR_BONUS = 5.0
    FREED_TILE_WEIGHT = 2.0
    LAYER_WEIGHT = 1.0

    def __init__(self, layout: Optional[BoardLayout] = None):
        """
        Args:
            layout: Board layout of the environment, needed by act()
                    to read observations and to index actions
        """
        self.layout = layout
        self._partner: Optional[Position] = None

    def score_pair(self, board: BoardState, p1: Position, p2: Position) -> float:
        """
        Score removing p1 and p2 from board (higher is better).
        """
        tile = board.occupant(p1)
        exposed_before = len(board.exposed_positions())
        group_size = sum(1 for _, t in board.items() if t.matches(tile))

        after = board.copy()
        attempt_match(after, p1, p2)

        score = 0.0
        if is_stuck(after):
            score -= self.STUCK_PENALTY
        if group_size == 2:
            score += self.GROUP_CLEAR_BONUS
        elif group_size == 4:
            group_exposed = sum(
                1 for p in board.exposed_positions() if board.occupant(p).matches(tile)
            )
            if group_exposed == 4:
                score += self.GROUP_CLEAR_BONUS

        # The two removed tiles were exposed, so count them back
        freed = len(after.exposed_positions()) - (exposed_before - 2)
        score += self.FREED_TILE_WEIGHT * freed
        score += self.LAYER_WEIGHT * (p1.layer + p2.layer)
        return score

    def choose_pair(self, session: GameSession) -> Optional[Tuple[Position, Position]]:
        """Best removable pair, or None if there is none"""
        return self._best_pair(session.board)

    def _best_pair(self, board: BoardState) -> Optional[Tuple[Position, Position]]:
        pairs = find_matching_pairs(board)
        if not pairs:
            return None
        return max(pairs, key=lambda pair: self.score_pair(board, *pair))

    def get_action(self, session: GameSession) -> Optional[Position]:
        """
        Next position to select.

        Returns None when the game is over or no pair is available.
        """
        if session.is_over:
            return None
        return self._next_position(session.board, session.selected)

    def _next_position(self, board: BoardState, selected: Optional[Position]) -> Optional[Position]:
        if selected is not None:
            if self._partner is not None and self._partner != selected:
                partner, self._partner = self._partner, None
                return partner
            # Selection we did not plan: drop it
            self._partner = None
            return selected

        pair = self._best_pair(board)
        if pair is None:
            return None
        first, self._partner = pair
        return first

    def act(self, observation: Dict[str, np.ndarray]) -> int:
        """
        Select an action given an environment observation.

        The board is rebuilt from the tile grid, so the agent needs the
        layout it was created with.

        Returns:
            Action index (0 if no pair is available)
        """
        if self.layout is None:
            raise ValueError("HeuristicAgent needs a layout to act on observations")

        board = self._board_from_observation(observation)
        chosen = np.argwhere(observation["selected"] == 1)
        selected = Position(*(int(v) for v in chosen[0])) if len(chosen) else None

        position = self._next_position(board, selected)
        if position is None:
            return 0
        return self.layout.index_of(position)

    def predict(self, observation: Dict[str, np.ndarray], deterministic: bool = True):
        """
        Predict action (stable-baselines style interface).

        Returns:
            Tuple of (action, state)
        """
        return self.act(observation), None

    def _board_from_observation(self, observation: Dict[str, np.ndarray]) -> BoardState:
        grid = observation["tiles"]
        tiles = {
            p: Tile.from_index(int(grid[p.layer, p.row, p.col]))
            for p in self.layout.positions
            if grid[p.layer, p.row, p.col] >= 0
        }
        return BoardState(self.layout, tiles)

    def play(self, session: GameSession, max_moves: int = 1000) -> SessionState:
        """
        Play session until it is won, stuck or max_moves pairs were tried.

        Returns the final session state.
        """
        for _ in range(max_moves):
            pair = self.choose_pair(session)
            if pair is None:
                break
            session.select(pair[0])
            session.select(pair[1])
            if session.is_over:
                break
        return session.state

    def reset(self):
        """Forget any planned partner."""
        self._partner = None

    def __repr__(self) -> str:
        if self.layout is None:
            return "HeuristicAgent()"
        return f"HeuristicAgent({self.layout.name})"
