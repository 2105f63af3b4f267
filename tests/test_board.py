import numpy as np
import pytest

from rotating_connect4.exceptions import ConstructionError
from rotating_connect4.game.board import Board
from rotating_connect4.utils import Cell


@pytest.mark.parametrize("width,height", [(1, 1), (7, 6), (3, 9)])
def test_get_outside_board_is_empty(width, height):
    board = Board(width, height)
    for col in range(1, width + 1):
        for row in range(1, height + 1):
            board.set(col, row, Cell.RED)

    for col, row in [(0, 1), (1, 0), (width + 1, 1), (1, height + 1),
                     (-3, -3), (width + 3, height + 3)]:
        assert board.get(col, row) == Cell.EMPTY


def test_new_board_is_empty():
    board = Board(7, 6)
    assert board.count(Cell.EMPTY) == 42
    assert not board.is_full()
    assert all(not board.is_column_full(col) for col in range(1, 8))


@pytest.mark.parametrize("width,height", [(0, 6), (7, 0), (-1, -1)])
def test_invalid_dimensions(width, height):
    with pytest.raises(ConstructionError):
        Board(width, height)


def test_set_outside_board_raises():
    board = Board(4, 4)
    with pytest.raises(IndexError):
        board.set(5, 1, Cell.RED)
    with pytest.raises(IndexError):
        board.set(1, 0, Cell.YELLOW)


def test_one_based_coordinates_with_top_row_first():
    board = Board(3, 2)
    board.set(1, 2, Cell.RED)
    board.set(3, 1, Cell.YELLOW)

    grid = board.to_array()
    assert grid[1, 0] == Cell.RED.value
    assert grid[0, 2] == Cell.YELLOW.value
    assert board.is_column_full(3)
    assert not board.is_column_full(1)


def test_duplicate_is_independent():
    board = Board(4, 4)
    board.set(2, 4, Cell.RED)

    copy = board.duplicate()
    assert copy == board

    copy.set(3, 4, Cell.YELLOW)
    assert board.get(3, 4) == Cell.EMPTY
    assert copy != board


def test_board_is_unhashable():
    with pytest.raises(TypeError):
        hash(Board(2, 2))


def test_from_rows_and_column_cells():
    board = Board.from_rows([
        "X . .",
        "O X .",
    ])
    assert (board.width, board.height) == (3, 2)
    assert board.column_cells(1) == [Cell.RED, Cell.YELLOW]
    assert board.column_cells(2) == [Cell.EMPTY, Cell.RED]
    assert board.count(Cell.RED) == 2
    assert board.count(Cell.YELLOW) == 1


def test_from_rows_rejects_ragged_rows():
    with pytest.raises(ConstructionError):
        Board.from_rows(["XX", "X"])
    with pytest.raises(ValueError):
        Board.from_rows(["X?"])


def test_render_shows_tokens_and_column_numbers():
    board = Board(7, 6)
    board.set(4, 6, Cell.RED)
    board.set(5, 6, Cell.YELLOW)

    lines = board.render().splitlines()
    assert len(lines) == 6 + 3
    assert lines[6] == "| . . . X O . . |"
    assert lines[-1].split() == [str(col) for col in range(1, 8)]
    assert str(board) == board.render()


def test_is_full():
    board = Board(2, 2)
    board.grid = np.full((2, 2), Cell.YELLOW.value, dtype=np.int8)
    assert board.is_full()
