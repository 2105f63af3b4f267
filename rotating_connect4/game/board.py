"""
board.py - Board representation for the rotating Connect Four engine

This module implements the Board class, a width x height grid of cells
addressed by 1-based (column, row) coordinates with row 1 at the top.
Reads outside the grid return an empty cell so that win scans can probe
past the edges without bounds checks.
"""

from typing import List, Sequence

import numpy as np

from rotating_connect4.debug import debug
from rotating_connect4.exceptions import ConstructionError
from rotating_connect4.utils import Cell, render_board_ascii


class Board:
    """
    A fixed-size Connect Four grid.

    The cells live in a numpy array of shape (height, width); the 1-based
    coordinate convention is translated here and nowhere else.
    """

    def __init__(self, width: int, height: int):
        """
        Create an empty board.

        Args:
            width: Number of columns, at least 1
            height: Number of rows, at least 1

        Raises:
            ConstructionError: if either dimension is below 1
        """
        if width < 1:
            raise ConstructionError(f"Board width must be at least 1, got {width}")
        if height < 1:
            raise ConstructionError(f"Board height must be at least 1, got {height}")

        debug.trace(f"Initializing {width}x{height} board", "board")
        self.width = width
        self.height = height
        self.grid = np.full((height, width), Cell.EMPTY.value, dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> 'Board':
        """
        Build a board from glyph strings, top row first.

        Whitespace inside a row is ignored, so ``"X . O"`` and ``"X.O"`` are
        the same row. Gravity is not applied.

        Raises:
            ConstructionError: if there are no rows or rows differ in length
            ValueError: on an unknown glyph
        """
        parsed = [[Cell.from_glyph(ch) for ch in row if not ch.isspace()] for row in rows]
        if not parsed or not parsed[0]:
            raise ConstructionError("A board needs at least one row and one column")
        width = len(parsed[0])
        if any(len(row) != width for row in parsed):
            raise ConstructionError("All rows must have the same number of cells")

        board = cls(width, len(parsed))
        for row_index, row in enumerate(parsed, start=1):
            for col_index, cell in enumerate(row, start=1):
                board.set(col_index, row_index, cell)
        return board

    def in_bounds(self, column: int, row: int) -> bool:
        return 1 <= column <= self.width and 1 <= row <= self.height

    def get(self, column: int, row: int) -> Cell:
        """Cell at (column, row), or ``Cell.EMPTY`` outside the grid."""
        if not self.in_bounds(column, row):
            return Cell.EMPTY
        return Cell(int(self.grid[row - 1, column - 1]))

    def set(self, column: int, row: int, cell: Cell) -> None:
        """
        Store ``cell`` at (column, row).

        Raises:
            IndexError: if the coordinates are outside the grid
        """
        if not self.in_bounds(column, row):
            raise IndexError(
                f"({column}, {row}) is outside the {self.width}x{self.height} board")
        self.grid[row - 1, column - 1] = cell.value

    def duplicate(self) -> 'Board':
        """Return an independent deep copy of the board."""
        copy = Board(self.width, self.height)
        copy.grid = self.grid.copy()
        return copy

    def is_column_full(self, column: int) -> bool:
        """A column is full once its top cell holds a token."""
        return self.get(column, 1) != Cell.EMPTY

    def is_full(self) -> bool:
        return bool(np.all(self.grid[0] != Cell.EMPTY.value))

    def column_cells(self, column: int) -> List[Cell]:
        """Cells of ``column`` from top to bottom."""
        return [self.get(column, row) for row in range(1, self.height + 1)]

    def count(self, cell: Cell) -> int:
        return int(np.count_nonzero(self.grid == cell.value))

    def to_array(self) -> np.ndarray:
        """Copy of the underlying grid, indexed [row - 1, column - 1]."""
        return self.grid.copy()

    def render(self) -> str:
        return render_board_ascii(self.grid)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) \
            and bool(np.array_equal(self.grid, other.grid))

    # Boards are mutable, so equality by contents rules out hashing
    __hash__ = None

    def __repr__(self) -> str:
        return f"Board(width={self.width}, height={self.height})"

    def __str__(self) -> str:
        return self.render()
