import pytest

from rotating_connect4.exceptions import (ConstructionError, InvalidMoveError,
                                          TerminalStateError)
from rotating_connect4.game.board import Board
from rotating_connect4.game.rules import ConnectFourGame, is_winning_cell
from rotating_connect4.utils import Cell, GameStatus

R, Y = Cell.RED, Cell.YELLOW

# Rows top to bottom; no four in a row anywhere
DRAW_ROWS = [
    "XXOOXXO",
    "OOXXOOX",
    "XXOOXXO",
    "OOXXOOX",
    "XXOOXXO",
    "OOXXOOX",
]


def play_all(game, moves):
    for column, token in moves:
        game.play(column, token)


def test_first_token_lands_on_bottom_row():
    game = ConnectFourGame(7, 6)
    assert game.play(4, R) == 6
    assert game.get_status() == GameStatus.IN_PROGRESS
    assert game.get_board().get(4, 6) == R


def test_column_fills_bottom_to_top():
    game = ConnectFourGame(7, 6)
    tokens = [R, Y, R, Y, R, Y]
    for k, token in enumerate(tokens, start=1):
        assert game.play(3, token) == 6 - k + 1
    assert game.board.is_column_full(3)
    assert game.status == GameStatus.IN_PROGRESS


def test_vertical_win_on_fourth_token():
    game = ConnectFourGame(7, 6)
    for _ in range(3):
        game.play(4, R)
        assert game.status == GameStatus.IN_PROGRESS

    game.play(4, R)
    assert game.status == GameStatus.PLAYER_ONE_WIN
    assert game.winner() == R

    with pytest.raises(TerminalStateError):
        game.play(4, Y)
    assert game.board.get(4, 2) == Cell.EMPTY


def test_horizontal_win_completed_in_the_middle():
    game = ConnectFourGame(7, 6)
    play_all(game, [(2, Y), (3, Y), (5, Y)])
    assert game.status == GameStatus.IN_PROGRESS

    game.play(4, Y)
    assert game.status == GameStatus.PLAYER_TWO_WIN


def test_broken_horizontal_line_is_not_a_win():
    game = ConnectFourGame(7, 6)
    play_all(game, [(1, R), (2, R), (4, R), (5, R)])
    assert game.status == GameStatus.IN_PROGRESS


def test_rising_diagonal_win():
    game = ConnectFourGame(7, 6)
    play_all(game, [
        (1, R),
        (2, Y), (2, R),
        (3, Y), (3, Y), (3, R),
        (4, Y), (4, Y), (4, Y),
    ])
    assert game.status == GameStatus.IN_PROGRESS

    assert game.play(4, R) == 3
    assert game.status == GameStatus.PLAYER_ONE_WIN


def test_falling_diagonal_win():
    game = ConnectFourGame(7, 6)
    play_all(game, [
        (7, Y),
        (6, R), (6, Y),
        (5, R), (5, R), (5, Y),
        (4, R), (4, R), (4, R),
    ])
    assert game.status == GameStatus.IN_PROGRESS

    game.play(4, Y)
    assert game.status == GameStatus.PLAYER_TWO_WIN


def test_full_column_is_rejected_without_changes():
    game = ConnectFourGame(7, 6)
    play_all(game, [(1, token) for token in [R, Y, R, Y, R, Y]])
    snapshot = game.board.duplicate()

    with pytest.raises(InvalidMoveError):
        game.play(1, R)

    assert game.board == snapshot
    assert game.status == GameStatus.IN_PROGRESS
    assert 1 not in game.valid_columns()


@pytest.mark.parametrize("column", [0, -1, 8, 100])
def test_out_of_range_column(column):
    game = ConnectFourGame(7, 6)
    assert game.column_invalid(column)
    with pytest.raises(InvalidMoveError):
        game.play(column, R)
    assert game.board.count(Cell.EMPTY) == 42


def test_column_invalid_ignores_fullness():
    game = ConnectFourGame(2, 1)
    game.play(1, R)
    assert not game.column_invalid(1)
    assert not game.column_invalid(2)


def test_empty_token_is_rejected():
    game = ConnectFourGame(7, 6)
    with pytest.raises(InvalidMoveError):
        game.play(1, Cell.EMPTY)


@pytest.mark.parametrize("width,height", [(0, 6), (7, 0)])
def test_construction_error(width, height):
    with pytest.raises(ConstructionError):
        ConnectFourGame(width, height)


def test_draw_when_last_cell_filled():
    game = ConnectFourGame(7, 6)
    moves = []
    for row in reversed(DRAW_ROWS):
        for column, glyph in enumerate(row, start=1):
            moves.append((column, Cell.from_glyph(glyph)))

    play_all(game, moves[:-1])
    assert game.status == GameStatus.IN_PROGRESS

    column, token = moves[-1]
    game.play(column, token)
    assert game.status == GameStatus.DRAW
    assert game.winner() is None
    assert game.valid_columns() == []


def test_small_board_fills_to_a_draw():
    game = ConnectFourGame(3, 3)
    for column in (1, 2, 3):
        for token in (R, Y, R):
            game.play(column, token)
    assert game.status == GameStatus.DRAW


def test_is_winning_cell_probes_past_edges():
    board = Board.from_rows(["XXXX"])
    assert is_winning_cell(board, 1, 1)
    assert is_winning_cell(board, 4, 1)
    assert not is_winning_cell(Board.from_rows(["XXX"]), 1, 1)


def test_from_board_settles_and_scores():
    board = Board.from_rows([
        "X......",
        ".......",
        "X......",
        ".......",
        "X......",
        "X......",
    ])
    game = ConnectFourGame.from_board(board)
    assert game.board.column_cells(1) == [Cell.EMPTY, Cell.EMPTY, R, R, R, R]
    assert game.status == GameStatus.PLAYER_ONE_WIN


def test_from_board_full_position_is_a_draw():
    game = ConnectFourGame.from_board(Board.from_rows(DRAW_ROWS))
    assert game.status == GameStatus.DRAW


def test_moves_are_recorded():
    game = ConnectFourGame(7, 6)
    game.play(2, R)
    with pytest.raises(InvalidMoveError):
        game.play(9, Y)
    assert game.moves_made == [("play", 2, R)]
