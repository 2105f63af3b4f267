"""
rules.py - Game engine and Gymnasium environment for rotating Connect Four

This module provides:
1. ConnectFourGame, the engine: gravity drops, four-in-a-row detection,
   quarter-turn rotation of the whole board with re-settling, and the
   resulting game status
2. ConnectFourEnv, a gymnasium-compatible environment driving the engine
"""

from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from rotating_connect4.debug import debug
from rotating_connect4.exceptions import (Connect4Error, InvalidMoveError,
                                          TerminalStateError)
from rotating_connect4.game.board import Board
from rotating_connect4.utils import (CONNECT_N, DEFAULT_HEIGHT, DEFAULT_WIDTH,
                                     DIRECTION_VECTORS, Cell, GameStatus,
                                     Rotation)


def drop_token(board: Board, column: int, token: Cell) -> Optional[int]:
    """
    Place ``token`` in the lowest empty cell of ``column``.

    Columns are always empty above their tokens, so the first empty cell
    found sweeping up from the bottom is the landing cell.

    Returns:
        The landing row, or None if the column is full
    """
    for row in range(board.height, 0, -1):
        if board.get(column, row) == Cell.EMPTY:
            board.set(column, row, token)
            return row
    return None


def rotate_board(board: Board, rotation: Rotation) -> Board:
    """
    Return a new board holding ``board`` turned a quarter turn.

    A W x H board becomes H x W. Old cell (i, j) moves to
    (j, W - i + 1) for CLOCKWISE and to (H - j + 1, i) for
    COUNTER_CLOCKWISE. No gravity is applied.
    """
    width, height = board.width, board.height
    rotated = Board(height, width)

    for i in range(1, width + 1):
        for j in range(1, height + 1):
            cell = board.get(i, j)
            if cell == Cell.EMPTY:
                continue
            if rotation == Rotation.CLOCKWISE:
                rotated.set(j, width - i + 1, cell)
            else:
                rotated.set(height - j + 1, i, cell)

    return rotated


def settle_board(board: Board) -> Board:
    """
    Return a new board where every column's tokens have fallen to the bottom.

    Tokens keep their relative vertical order; empty cells end up on top.
    """
    settled = Board(board.width, board.height)

    for column in range(1, board.width + 1):
        tokens = [cell for cell in board.column_cells(column) if cell != Cell.EMPTY]
        # Lowest token first so the stack is rebuilt in its original order
        for token in reversed(tokens):
            drop_token(settled, column, token)

    return settled


def is_winning_cell(board: Board, column: int, row: int) -> bool:
    """
    Check whether the token at (column, row) is part of four in a row.

    Each axis is examined as the four windows of CONNECT_N consecutive cells
    that contain the anchor. Cells off the board read as empty, so windows
    crossing an edge never match.
    """
    token = board.get(column, row)
    if token == Cell.EMPTY:
        return False

    for d_col, d_row in DIRECTION_VECTORS.values():
        for start in range(1 - CONNECT_N, 1):
            if all(board.get(column + (start + k) * d_col, row + (start + k) * d_row) == token
                   for k in range(CONNECT_N)):
                return True

    return False


class ConnectFourGame:
    """
    Connect Four engine with board rotation.

    Owns one board and the game status. The status only ever moves from
    IN_PROGRESS to a terminal value; a finished game refuses further moves
    and rotations, so a new game means a new ConnectFourGame.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        """
        Initialize a new game on an empty board.

        Raises:
            ConstructionError: if width or height is below 1
        """
        self._board = Board(width, height)
        self._status = GameStatus.IN_PROGRESS
        self.moves_made: List[Tuple] = []
        debug.debug(f"Initializing {width}x{height} ConnectFourGame", "engine")

    @classmethod
    def from_board(cls, board: Board) -> 'ConnectFourGame':
        """
        Start a game from an existing position.

        The tokens are settled to the bottom of their columns and the status
        is computed from the whole board, as after a rotation.
        """
        game = cls(board.width, board.height)
        game._board = settle_board(board)
        game._rescan_status()
        return game

    @property
    def board(self) -> Board:
        return self._board

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def width(self) -> int:
        return self._board.width

    @property
    def height(self) -> int:
        return self._board.height

    def get_board(self) -> Board:
        return self._board

    def get_status(self) -> GameStatus:
        return self._status

    def is_game_over(self) -> bool:
        return self._status.is_game_over()

    def winner(self) -> Optional[Cell]:
        """The winning colour, or None while in progress or on a draw."""
        return self._status.winner()

    def column_invalid(self, column: int) -> bool:
        """True when ``column`` is outside 1..width. Fullness is not considered."""
        return column < 1 or column > self._board.width

    def valid_columns(self) -> List[int]:
        """Columns that can currently take a token."""
        if self.is_game_over():
            return []
        return [col for col in range(1, self._board.width + 1)
                if not self._board.is_column_full(col)]

    def _ensure_in_progress(self, action: str) -> None:
        if self.is_game_over():
            debug.debug(f"Rejected {action}: game is over ({self._status.name})", "engine")
            raise TerminalStateError(f"Cannot {action}: the game is over ({self._status.name})")

    def play(self, column: int, token: Cell) -> int:
        """
        Drop ``token`` into ``column``.

        Args:
            column: Column between 1 and the board width
            token: Cell.RED or Cell.YELLOW

        Returns:
            The row the token landed on

        Raises:
            TerminalStateError: if the game is already over
            InvalidMoveError: if the column is out of range or full, or the
                token is not a colour
        """
        self._ensure_in_progress("play")

        if token == Cell.EMPTY:
            raise InvalidMoveError("Only a red or yellow token can be played")

        if self.column_invalid(column):
            debug.debug(f"Rejected play: column {column} out of bounds", "engine")
            raise InvalidMoveError(
                f"Column must be between 1 and {self._board.width}, got {column}")

        if self._board.is_column_full(column):
            debug.debug(f"Rejected play: column {column} is full", "engine")
            raise InvalidMoveError(f"Column {column} is full")

        row = drop_token(self._board, column, token)
        debug.trace(f"{token.name} landed at ({column}, {row})", "engine")
        self.moves_made.append(("play", column, token))

        debug.start_timer("win_check")
        self._update_status_at(column, row)
        debug.end_timer("win_check", "engine")

        return row

    def _update_status_at(self, column: int, row: int) -> None:
        if is_winning_cell(self._board, column, row):
            self._status = GameStatus.win_for(self._board.get(column, row))
            debug.info(f"{self._status.name} after move at ({column}, {row})", "engine")
        elif self._board.is_full():
            self._status = GameStatus.DRAW
            debug.info("Game ends in a draw", "engine")
        else:
            self._status = GameStatus.IN_PROGRESS

    def rotate(self, rotation: Rotation) -> None:
        """
        Turn the whole board a quarter turn, let the tokens fall, and rescore.

        Width and height swap. Rotation can create lines for both colours at
        once; that outcome is a draw.

        Raises:
            TerminalStateError: if the game is already over
        """
        self._ensure_in_progress("rotate")

        debug.debug(f"Rotating board {rotation.name}", "engine")
        self._board = settle_board(rotate_board(self._board, rotation))
        self.moves_made.append(("rotate", rotation))

        debug.start_timer("rescan")
        self._rescan_status()
        debug.end_timer("rescan", "engine")

    def _winning_colours(self) -> Dict[Cell, bool]:
        """Sweep every cell once; stop as soon as both colours have a line."""
        wins = {Cell.RED: False, Cell.YELLOW: False}

        for column in range(1, self._board.width + 1):
            for row in range(1, self._board.height + 1):
                cell = self._board.get(column, row)
                if cell == Cell.EMPTY or wins[cell]:
                    continue
                if is_winning_cell(self._board, column, row):
                    wins[cell] = True
                    if all(wins.values()):
                        return wins

        return wins

    def _rescan_status(self) -> None:
        """Recompute the status from the whole board."""
        wins = self._winning_colours()

        if all(wins.values()):
            self._status = GameStatus.DRAW
        elif wins[Cell.RED]:
            self._status = GameStatus.PLAYER_ONE_WIN
        elif wins[Cell.YELLOW]:
            self._status = GameStatus.PLAYER_TWO_WIN
        elif self._board.is_full():
            self._status = GameStatus.DRAW
        else:
            self._status = GameStatus.IN_PROGRESS

        if self._status.is_game_over():
            debug.info(f"{self._status.name} after rotation", "engine")

    def render(self) -> str:
        return self._board.render()


class ConnectFourEnv(gym.Env):
    """
    Rotating Connect Four following the Gymnasium interface.

    The board is square so the observation shape survives rotations.
    Actions ``0..size-1`` drop a token in that (0-indexed) column; when
    rotation is allowed, action ``size`` turns the board clockwise and
    ``size + 1`` counter-clockwise. Red moves first and the players
    alternate on every accepted action. Rewards are given from Red's side.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, size: int = DEFAULT_WIDTH, allow_rotation: bool = True,
                 render_mode: Optional[str] = None):
        debug.debug("Initializing ConnectFourEnv", "env")

        if render_mode is not None and render_mode not in self.metadata['render_modes']:
            raise ValueError(f"Unsupported render mode: {render_mode}")

        self.size = size
        self.allow_rotation = allow_rotation
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(size + 2 if allow_rotation else size)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(size, size), dtype=np.int8
        )

        self.game = ConnectFourGame(size, size)
        self.current_token = Cell.RED

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)

        self.game = ConnectFourGame(self.size, self.size)
        self.current_token = Cell.RED

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Apply one action for the player to move.

        An illegal action leaves the game untouched and ends the episode as
        truncated with the invalid-move penalty.
        """
        debug.debug(f"Environment step with action {action} for {self.current_token.name}", "env")

        try:
            self._apply(int(action))
        except Connect4Error as e:
            debug.warning(f"Invalid action {action}: {e}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        status = self.game.status
        reward = self.reward_step
        terminated = status.is_game_over()

        if status == GameStatus.PLAYER_ONE_WIN:
            reward = self.reward_win
        elif status == GameStatus.PLAYER_TWO_WIN:
            reward = self.reward_lose
        elif status == GameStatus.DRAW:
            reward = self.reward_draw

        if not terminated:
            self.current_token = self.current_token.other()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def _apply(self, action: int) -> None:
        if 0 <= action < self.size:
            self.game.play(action + 1, self.current_token)
        elif self.allow_rotation and action == self.size:
            self.game.rotate(Rotation.CLOCKWISE)
        elif self.allow_rotation and action == self.size + 1:
            self.game.rotate(Rotation.COUNTER_CLOCKWISE)
        else:
            raise InvalidMoveError(f"Action {action} is outside the action space")

    def valid_actions(self) -> List[int]:
        if self.game.is_game_over():
            return []
        actions = [col - 1 for col in self.game.valid_columns()]
        if self.allow_rotation:
            actions.extend([self.size, self.size + 1])
        return actions

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode == "ascii":
            return self.game.render()
        if self.render_mode == "human":
            print(self.game.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.game.board.to_array()

    def _get_info(self) -> Dict:
        valid_actions = self.valid_actions()
        return {
            'valid_actions': valid_actions,
            'num_valid_actions': len(valid_actions),
            'current_token': self.current_token.name,
            'status': self.game.status.name,
            'moves_made': len(self.game.moves_made),
        }

    def close(self):
        pass
