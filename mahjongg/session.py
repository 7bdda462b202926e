"""
Mahjongg Game Session

State machine driving one game: selection, matching, win and stuck
detection, restart, and the hint / undo / shuffle helpers a front-end
offers. A front-end only needs select() and restart() to play.
"""

import logging
from enum import IntEnum
from dataclasses import dataclass
from typing import FrozenSet, List, Mapping, Optional, Tuple, Union
import numpy as np

from .tiles import Tile
from .layout import BoardLayout, Position, get_layout
from .board import BoardState
from .match import attempt_match, find_matching_pairs
from .deal import DealGenerator, is_stuck
from .config import GameConfig

logger = logging.getLogger(__name__)


def _as_config(config: Union[GameConfig, Mapping, None]) -> GameConfig:
    if config is None:
        return GameConfig()
    if isinstance(config, GameConfig):
        return config
    return GameConfig.from_dict(config)


class SessionState(IntEnum):
    """States of a game session"""
    SELECTING = 0    # No tile chosen
    ONE_CHOSEN = 1   # One tile chosen, waiting for its partner
    WON = 2          # Board cleared
    STUCK = 3        # Tiles remain but no pair can be removed


class SelectionOutcome(IntEnum):
    """What a call to select() did"""
    ONE_CHOSEN = 0
    DESELECTED = 1
    MATCH_SUCCESS = 2
    MATCH_FAILURE = 3
    ILLEGAL_SELECTION = 4
    WON = 5
    STUCK = 6


@dataclass
class SelectionResult:
    """
    Result of a selection.

    Attributes:
        outcome: What happened
        positions: Positions involved (the chosen tile, or both tiles of
                   a match attempt)
        reason: Explanation for failed or illegal selections
    """
    outcome: SelectionOutcome
    positions: Tuple[Position, ...] = ()
    reason: Optional[str] = None

    def __repr__(self) -> str:
        return f"SelectionResult({self.outcome.name}, {list(self.positions)})"


@dataclass
class BoardSnapshot:
    """Everything a front-end needs to draw the game"""
    occupant_grid: np.ndarray       # tile index per (layer, row, col), -1 if empty
    exposed: FrozenSet[Position]
    state: SessionState
    selected: Optional[Position]
    tiles_remaining: int
    moves: int


@dataclass
class RemovedPair:
    """A matched pair, kept for undo"""
    first: Position
    first_tile: Tile
    second: Position
    second_tile: Tile


class GameSession:
    """
    One player's game.

    Sessions hold all game state; nothing is shared between them.
    """

    def __init__(self, config: Union[GameConfig, Mapping, None] = None):
        """
        Create a session and deal the first board.

        Args:
            config: Game configuration, or a mapping of its fields
                    (camelCase keys accepted). Defaults to the pyramid
                    layout with a solvable deal.
        """
        self.config = _as_config(config)
        self.layout: BoardLayout = get_layout(self.config.layout_name)
        self.dealer = DealGenerator(policy=self.config.deal_policy, seed=self.config.seed)

        self.board: BoardState = None
        self.state = SessionState.SELECTING
        self.selected: Optional[Position] = None
        self.history: List[RemovedPair] = []
        self.moves = 0
        self.shuffles_used = 0
        self.games_started = 0

        self._deal()

    @classmethod
    def from_board(
        cls, board: BoardState, config: Union[GameConfig, Mapping, None] = None
    ) -> 'GameSession':
        """
        Start a session on an existing board instead of a fresh deal.

        Restarting deals on the board's own layout.
        """
        session = cls.__new__(cls)
        session.config = _as_config(config)
        session.layout = board.layout
        session.dealer = DealGenerator(policy=session.config.deal_policy, seed=session.config.seed)
        session.board = board
        session.state = SessionState.SELECTING
        session.selected = None
        session.history = []
        session.moves = 0
        session.shuffles_used = 0
        session.games_started = 1
        if board.is_empty():
            session.state = SessionState.WON
        else:
            session._check_stuck()
        return session

    def _deal(self) -> None:
        self.board = self.dealer.deal(self.layout)
        self.state = SessionState.SELECTING
        self.selected = None
        self.history = []
        self.moves = 0
        self.shuffles_used = 0
        self.games_started += 1
        # A random deal can be blocked from the start
        self._check_stuck()

    def restart(self) -> None:
        """Abandon the current board and deal a new one"""
        logger.info(f"Restarting game (game #{self.games_started + 1})")
        self._deal()

    def select(self, p: Position) -> SelectionResult:
        """
        Handle the player picking the tile at p.

        Gameplay problems are reported through the result; only a
        position that is not on the layout raises (OutOfBounds).
        """
        p = Position(*p)
        exposed = self.board.is_exposed(p)

        if self.state == SessionState.WON:
            return SelectionResult(SelectionOutcome.ILLEGAL_SELECTION, (p,), "game is already won")
        if self.state == SessionState.STUCK:
            return SelectionResult(SelectionOutcome.ILLEGAL_SELECTION, (p,), "no moves left")

        if self.state == SessionState.SELECTING:
            if not exposed:
                reason = "no tile there" if self.board.occupant(p) is None else "tile is not free"
                logger.debug(f"Illegal selection {p}: {reason}")
                return SelectionResult(SelectionOutcome.ILLEGAL_SELECTION, (p,), reason)
            self.selected = p
            self.state = SessionState.ONE_CHOSEN
            logger.debug(f"Selected {p} ({self.board.occupant(p)})")
            return SelectionResult(SelectionOutcome.ONE_CHOSEN, (p,))

        # ONE_CHOSEN
        first = self.selected
        if p == first:
            self._clear_selection()
            return SelectionResult(SelectionOutcome.DESELECTED, (p,))

        first_tile, second_tile = self.board.occupant(first), self.board.occupant(p)
        attempt = attempt_match(self.board, first, p)
        self._clear_selection()
        if not attempt.success:
            return SelectionResult(SelectionOutcome.MATCH_FAILURE, (first, p), attempt.reason)

        self.history.append(RemovedPair(first, first_tile, p, second_tile))
        self.moves += 1

        if self.board.is_empty():
            self.state = SessionState.WON
            logger.info(f"Board cleared in {self.moves} moves")
            return SelectionResult(SelectionOutcome.WON, (first, p))
        if self._check_stuck():
            return SelectionResult(SelectionOutcome.STUCK, (first, p), "no moves left")
        return SelectionResult(SelectionOutcome.MATCH_SUCCESS, (first, p))

    def _clear_selection(self) -> None:
        self.selected = None
        self.state = SessionState.SELECTING

    def _check_stuck(self) -> bool:
        """Move to STUCK (or auto-shuffle) if no pair is available"""
        if not is_stuck(self.board):
            return False
        if self.config.auto_shuffle:
            logger.info("No moves left, shuffling automatically")
            self.shuffle()
            return self.state == SessionState.STUCK
        self.state = SessionState.STUCK
        logger.info(f"Stuck with {self.board.occupied_count} tiles left")
        return True

    def shuffle(self) -> bool:
        """
        Rearrange the remaining tiles over their current positions.

        Allowed until the game is won. Undo history is cleared since
        the removed pairs no longer fit the new arrangement.

        Returns True if the board has an available pair afterwards.
        """
        if self.state == SessionState.WON:
            return False
        self.board = self.dealer.shuffle_remaining(self.board)
        self.shuffles_used += 1
        self.history = []
        self.selected = None
        if is_stuck(self.board):
            self.state = SessionState.STUCK
            return False
        self.state = SessionState.SELECTING
        return True

    def undo(self) -> bool:
        """
        Put the last matched pair back on the board.

        Returns False if there is nothing to undo.
        """
        if not self.history:
            return False
        pair = self.history.pop()
        self.board.place(pair.first, pair.first_tile)
        self.board.place(pair.second, pair.second_tile)
        self.moves -= 1
        self._clear_selection()
        logger.debug(f"Undid {pair.first} / {pair.second}")
        return True

    def hint(self) -> Optional[Tuple[Position, Position]]:
        """A removable pair, preferring tiles on higher layers"""
        pairs = find_matching_pairs(self.board)
        if not pairs:
            return None
        return max(pairs, key=lambda pair: pair[0].layer + pair[1].layer)

    def available_pairs(self) -> List[Tuple[Position, Position]]:
        """All removable pairs on the board"""
        return find_matching_pairs(self.board)

    def current_state(self) -> BoardSnapshot:
        """Snapshot of the board for rendering"""
        return BoardSnapshot(
            occupant_grid=self.board.to_index_grid(),
            exposed=frozenset(self.board.exposed_positions()),
            state=self.state,
            selected=self.selected,
            tiles_remaining=self.board.occupied_count,
            moves=self.moves,
        )

    @property
    def is_over(self) -> bool:
        return self.state in (SessionState.WON, SessionState.STUCK)

    def __repr__(self) -> str:
        return (
            f"GameSession({self.layout.name}, {self.state.name}, "
            f"{self.board.occupied_count} tiles left)"
        )


def new_game(config: Union[GameConfig, Mapping, None] = None) -> GameSession:
    """Start a new game session"""
    return GameSession(config)


def select(session: GameSession, position: Position) -> SelectionResult:
    """Select the tile at position in session"""
    return session.select(position)


def restart(session: GameSession) -> None:
    """Deal a new board in session"""
    session.restart()


def current_state(session: GameSession) -> BoardSnapshot:
    """Rendering snapshot of session"""
    return session.current_state()
