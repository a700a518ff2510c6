from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


PIECE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[2, 2], [2, 2]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 3, 0], [3, 3, 3]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 4, 4], [4, 4, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[5, 5, 0], [0, 5, 5]], dtype=np.int8),
    TetrominoType.J: np.array([[6, 0, 0], [6, 6, 6]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 7], [7, 7, 7]], dtype=np.int8),
}


def rotate(matrix: Shape) -> Shape:
    """Rotate 90 degrees clockwise: cell (r, c) of an RxC matrix lands on (c, R-1-r)."""
    return np.rot90(np.asarray(matrix), k=-1).copy()


def shape_for(kind: TetrominoType) -> Shape:
    return PIECE_SHAPES[kind].copy()


def spawn_column(board_width: int, matrix: Shape) -> int:
    return board_width // 2 - np.asarray(matrix).shape[1] // 2


@dataclass(eq=False)
class Piece:
    matrix: Shape
    x: int = 0
    y: int = 0
    kind: Optional[TetrominoType] = None

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "Piece":
        matrix = shape_for(kind)
        return cls(matrix=matrix, x=spawn_column(board_width, matrix), y=0, kind=kind)

    @property
    def height(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self.matrix.shape[1])

    def moved(self, dx: int = 0, dy: int = 0) -> "Piece":
        return Piece(self.matrix, self.x + dx, self.y + dy, self.kind)

    def rotated(self) -> "Piece":
        return Piece(rotate(self.matrix), self.x, self.y, self.kind)

    def cells(self) -> List[Tuple[int, int]]:
        """Board coordinates (x, y) of every occupied cell."""
        ys, xs = np.nonzero(self.matrix)
        return [(self.x + int(dx), self.y + int(dy)) for dy, dx in zip(ys, xs)]


class BagRandomizer:
    """Deals every tetromino exactly once per shuffled bag of seven."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self._bag: List[TetrominoType] = []

    def _refill(self) -> None:
        self._bag = list(TetrominoType)
        self.rng.shuffle(self._bag)

    @property
    def remaining(self) -> int:
        return len(self._bag)

    def next_kind(self) -> TetrominoType:
        if not self._bag:
            self._refill()
        return self._bag.pop()
