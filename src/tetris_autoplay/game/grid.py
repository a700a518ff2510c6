from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .pieces import Piece


Board = np.ndarray


def as_occupancy(cells) -> Board:
    """Boolean occupancy view of any board-like input; piece ids are dropped."""
    return np.asarray(cells) != 0


def collides(board: Board, piece: Piece) -> bool:
    """True if the piece leaves the board sideways or below, or overlaps a filled cell.

    Cells above row 0 are outside the visible board but never collide, so a
    piece may hang over the top while it is moved around.
    """
    height, width = board.shape
    for x, y in piece.cells():
        if x < 0 or x >= width or y >= height:
            return True
        if y >= 0 and board[y, x] != 0:
            return True
    return False


def rotate_with_nudge(board: Board, piece: Piece) -> Optional[Piece]:
    """Rotate clockwise, nudging sideways +1, -2, +3, ... until the piece fits.

    Returns None once the nudge is wider than the rotated piece; the caller
    keeps the old orientation.
    """
    rotated = piece.rotated()
    offset = 1
    candidate = rotated
    while collides(board, candidate):
        candidate = candidate.moved(dx=offset)
        offset = -(offset + (1 if offset > 0 else -1))
        if offset > rotated.width:
            return None
    return candidate


def merge(board: Board, piece: Piece) -> Board:
    """Return a copy of `board` with the piece's occupied cells written in."""
    height, width = board.shape
    merged = board.copy()
    for x, y in piece.cells():
        if not (0 <= x < width and 0 <= y < height):
            raise ValueError(f"piece cell ({x}, {y}) lies outside the {width}x{height} board")
        merged[y, x] = piece.matrix[y - piece.y, x - piece.x]
    return merged


def clear_lines(board: Board) -> Tuple[Board, int]:
    full_rows = np.all(board != 0, axis=1)
    num = int(np.count_nonzero(full_rows))
    if num == 0:
        return board.copy(), 0
    kept = board[~full_rows]
    new_rows = np.zeros((num, board.shape[1]), dtype=board.dtype)
    return np.vstack((new_rows, kept)), num


def column_heights(board: Board) -> np.ndarray:
    """Per column: rows from the highest filled cell down to the floor, 0 if empty."""
    filled = board != 0
    top = np.argmax(filled, axis=0)
    return np.where(filled.any(axis=0), board.shape[0] - top, 0).astype(np.int64)


@dataclass
class LockResult:
    lines_cleared: int


class GameGrid:
    """Mutable playfield used by the game engine.

    Cells hold 0 for empty and the tetromino id for filled cells so a
    renderer can colour them; the collision and clearing logic only cares
    whether a cell is nonzero.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def collides(self, piece: Piece) -> bool:
        return collides(self.grid, piece)

    def lock(self, piece: Piece) -> LockResult:
        """Write the piece into the grid and clear full lines."""
        self.grid, lines = clear_lines(merge(self.grid, piece))
        return LockResult(lines_cleared=lines)

    def heights(self) -> np.ndarray:
        return column_heights(self.grid)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
