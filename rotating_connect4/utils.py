"""
utils.py - Constants, enumerations and helpers for the rotating Connect Four engine

Coordinates throughout the package are 1-based ``(column, row)`` pairs with
row 1 at the top of the board.
"""

from enum import Enum, auto
from typing import Dict, Optional, Tuple

import numpy as np

# Game constants
DEFAULT_WIDTH = 7
DEFAULT_HEIGHT = 6
CONNECT_N = 4  # Number of pieces in a row to win
DEFAULT_ROTATIONS = 4  # Rotations each player may spend in a CLI game


class Cell(Enum):
    """Contents of a board cell. Red belongs to player one, Yellow to player two."""
    EMPTY = 0
    RED = 1
    YELLOW = 2

    def other(self) -> 'Cell':
        """Get the opposing token colour."""
        if self == Cell.RED:
            return Cell.YELLOW
        elif self == Cell.YELLOW:
            return Cell.RED
        return Cell.EMPTY

    @classmethod
    def from_glyph(cls, glyph: str) -> 'Cell':
        for cell, symbol in CELL_GLYPHS.items():
            if symbol == glyph:
                return cell
        raise ValueError(f"Unknown cell glyph: {glyph!r}")

    def __str__(self):
        return CELL_GLYPHS[self]


CELL_GLYPHS: Dict[Cell, str] = {
    Cell.EMPTY: ".",
    Cell.RED: "X",
    Cell.YELLOW: "O",
}


class GameStatus(Enum):
    """Enumeration representing the game outcome."""
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        return self != GameStatus.IN_PROGRESS

    @classmethod
    def win_for(cls, cell: Cell) -> 'GameStatus':
        """Status reached when ``cell`` owns a winning line."""
        if cell == Cell.RED:
            return cls.PLAYER_ONE_WIN
        if cell == Cell.YELLOW:
            return cls.PLAYER_TWO_WIN
        raise ValueError("An empty cell cannot win")

    def winner(self) -> Optional[Cell]:
        if self == GameStatus.PLAYER_ONE_WIN:
            return Cell.RED
        if self == GameStatus.PLAYER_TWO_WIN:
            return Cell.YELLOW
        return None


class Rotation(Enum):
    """Quarter turn applied to the whole board."""
    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()

    @classmethod
    def parse(cls, text: str) -> 'Rotation':
        """Parse user input such as ``cw`` or ``counter-clockwise``."""
        key = text.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        if key in ("cw", "clockwise"):
            return cls.CLOCKWISE
        if key in ("ccw", "counterclockwise", "anticlockwise"):
            return cls.COUNTER_CLOCKWISE
        raise ValueError(f"Unknown rotation: {text!r}")

    def inverse(self) -> 'Rotation':
        if self == Rotation.CLOCKWISE:
            return Rotation.COUNTER_CLOCKWISE
        return Rotation.CLOCKWISE


class Direction(Enum):
    """Axes examined by the win scan."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_DOWN = auto()  # top-left to bottom-right
    DIAGONAL_UP = auto()  # bottom-left to top-right


# Direction vectors (d_column, d_row) for each axis
DIRECTION_VECTORS: Dict[Direction, Tuple[int, int]] = {
    Direction.HORIZONTAL: (1, 0),
    Direction.VERTICAL: (0, 1),
    Direction.DIAGONAL_DOWN: (1, 1),
    Direction.DIAGONAL_UP: (1, -1),
}


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a board grid as ASCII art.

    Args:
        grid: Array of shape (height, width) holding ``Cell`` values, row 1 first

    Returns:
        ASCII representation with 1-based column numbers underneath
    """
    height, width = grid.shape
    # Column labels may be wider than one character on big boards
    cell_width = len(str(width))

    def pad(text: str) -> str:
        return text.rjust(cell_width)

    border = "+" + "-" * (width * (cell_width + 1) + 1) + "+"
    lines = [border]
    for row in range(height):
        glyphs = [pad(CELL_GLYPHS[Cell(int(value))]) for value in grid[row]]
        lines.append("| " + " ".join(glyphs) + " |")
    lines.append(border)
    lines.append("  " + " ".join(pad(str(col)) for col in range(1, width + 1)))

    return "\n".join(lines)
