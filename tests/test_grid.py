import numpy as np
import pytest

from tetris_autoplay.game import (
    GameGrid,
    Piece,
    TetrominoType,
    as_occupancy,
    clear_lines,
    collides,
    column_heights,
    merge,
    rotate,
    shape_for,
)


def empty_board(height=20, width=10):
    return np.zeros((height, width), dtype=np.int8)


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_cells_off_the_sides_or_bottom_always_collide(kind):
    matrix = shape_for(kind)
    h, w = matrix.shape
    board = empty_board()
    assert collides(board, Piece(matrix, -1, 0))
    assert collides(board, Piece(matrix, 10 - w + 1, 0))
    assert collides(board, Piece(matrix, 0, 20 - h + 1))
    assert not collides(board, Piece(matrix, 0, 20 - h))


def test_rows_above_the_top_do_not_collide():
    vertical_i = rotate(shape_for(TetrominoType.I))
    assert not collides(empty_board(), Piece(vertical_i, 0, -2))


def test_overlap_with_filled_cell_collides():
    board = empty_board()
    board[19, 4] = 3
    o_piece = shape_for(TetrominoType.O)
    assert collides(board, Piece(o_piece, 3, 18))
    assert collides(board, Piece(o_piece, 4, 18))
    assert not collides(board, Piece(o_piece, 5, 18))
    assert not collides(board, Piece(o_piece, 3, 17))


def test_merge_returns_new_board():
    board = empty_board()
    t_piece = shape_for(TetrominoType.T)
    merged = merge(board, Piece(t_piece, 0, 18))
    assert not board.any()
    assert merged[18, 1] == 3
    assert list(merged[19, :3]) == [3, 3, 3]
    assert merged[18, 0] == 0 and merged[18, 2] == 0


def test_merge_into_occupancy_grid_marks_cells_true():
    board = np.zeros((4, 4), dtype=np.bool_)
    merged = merge(board, Piece(shape_for(TetrominoType.O), 1, 2))
    assert merged.dtype == np.bool_
    assert merged.sum() == 4


def test_merge_rejects_cells_outside_board():
    with pytest.raises(ValueError):
        merge(empty_board(), Piece(shape_for(TetrominoType.I), 8, 0))
    with pytest.raises(ValueError):
        merge(empty_board(), Piece(shape_for(TetrominoType.O), 0, -1))


def test_clear_single_full_row_shifts_rows_above_down():
    board = empty_board()
    board[15, :] = 1
    board[14, 0] = 2
    board[10, 3] = 5
    board[16, 1] = 4
    board[19, 9] = 7

    cleared, lines = clear_lines(board)

    assert lines == 1
    assert not cleared[0].any()
    assert np.array_equal(cleared[1:16], board[0:15])
    assert np.array_equal(cleared[16:], board[16:])
    assert cleared.shape == board.shape


def test_clear_non_adjacent_rows_keeps_order():
    board = empty_board()
    board[17, :] = 1
    board[19, :] = 1
    board[18, 2] = 6
    board[16, 5] = 3

    cleared, lines = clear_lines(board)

    assert lines == 2
    assert cleared[19, 2] == 6 and cleared[19].sum() == 6
    assert cleared[18, 5] == 3
    assert not cleared[:18].any()


def test_clear_lines_without_full_rows_is_noop():
    board = empty_board()
    board[19, :9] = 1
    cleared, lines = clear_lines(board)
    assert lines == 0
    assert np.array_equal(cleared, board)
    assert cleared is not board


def test_column_heights():
    board = empty_board()
    board[17, 2] = 1
    board[19, 2] = 1
    board[0, 9] = 1
    assert list(column_heights(board)) == [0, 0, 3, 0, 0, 0, 0, 0, 0, 20]


def test_as_occupancy_drops_piece_ids():
    occ = as_occupancy([[0, 3], [7, 0]])
    assert occ.dtype == np.bool_
    assert occ.tolist() == [[False, True], [True, False]]


def test_game_grid_lock_clears_lines():
    grid = GameGrid(4, 3)
    grid.grid[2, :2] = 1
    result = grid.lock(Piece(shape_for(TetrominoType.O), 2, 1))
    assert result.lines_cleared == 1
    assert list(grid.heights()) == [0, 0, 1, 1]
    assert grid.grid[2, 2] == int(TetrominoType.O)
