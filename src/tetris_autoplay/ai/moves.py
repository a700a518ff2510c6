from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from tetris_autoplay.game import Action, Piece, clear_lines, collides, merge, rotate_with_nudge

ROTATION_STATES = 4


@dataclass(eq=False)
class Move:
    """One candidate placement and the board it leaves behind."""

    board: np.ndarray
    lines_cleared: int
    actions: Tuple[Action, ...]
    matrix: np.ndarray
    x: int
    y: int
    rotation: int


def action_sequence(origin_x: int, target_x: int, rotations: int) -> Tuple[Action, ...]:
    """Rotations first, then one shift per column, then the hard drop."""
    diff = target_x - origin_x
    shift = Action.MOVE_LEFT if diff < 0 else Action.MOVE_RIGHT
    return (Action.ROTATE,) * rotations + (shift,) * abs(diff) + (Action.HARD_DROP,)


def drop_row(board: np.ndarray, matrix: np.ndarray, x: int) -> Optional[int]:
    """Row where the piece comes to rest falling straight down from row 0.

    Returns None when the piece already collides at row 0 or has no filled
    cells to land on.
    """
    if not np.any(matrix):
        return None
    piece = Piece(matrix, x, 0)
    if collides(board, piece):
        return None
    while not collides(board, piece.moved(dy=1)):
        piece = piece.moved(dy=1)
    return piece.y


def simulate_drop(board: np.ndarray, matrix: np.ndarray, x: int) -> Optional[Tuple[np.ndarray, int, int]]:
    """Hard-drop `matrix` at column `x`; returns (board, lines cleared, landing row)."""
    y = drop_row(board, matrix, x)
    if y is None:
        return None
    result, lines = clear_lines(merge(board, Piece(matrix, x, y)))
    return result, lines, y


def rotated_pose(board: np.ndarray, matrix: np.ndarray, origin_x: int, rotations: int) -> Optional[Piece]:
    """Where the game leaves the piece after `rotations` turns at the spawn row.

    Each turn applies the same sideways nudge as the game. Returns None when
    a turn is refused or the resulting pose does not fit.
    """
    piece = Piece(np.asarray(matrix), origin_x, 0)
    for _ in range(rotations):
        turned = rotate_with_nudge(board, piece)
        if turned is None:
            return None
        piece = turned
    if collides(board, piece):
        return None
    return piece


def shift_range(board: np.ndarray, piece: Piece) -> Tuple[int, int]:
    """Leftmost and rightmost columns reachable by single-column shifts at the piece's row."""
    left = piece.x
    while not collides(board, piece.moved(dx=left - 1 - piece.x)):
        left -= 1
    right = piece.x
    while not collides(board, piece.moved(dx=right + 1 - piece.x)):
        right += 1
    return left, right


def generate_moves(board: np.ndarray, matrix: np.ndarray, origin_x: int) -> List[Move]:
    """Every final resting placement of `matrix` reachable from the spawn row.

    Each rotation state is replayed from `origin_x` with the game's nudge
    rules, then shifted one column at a time, so a candidate's actions land
    the piece exactly where its board was computed. Rotation states come from
    applying `rotate` repeatedly, so symmetric pieces produce duplicate
    candidates. The result is ordered by lines cleared, most first.
    """
    moves: List[Move] = []
    if not np.any(matrix):
        return moves
    for rotation in range(ROTATION_STATES):
        pose = rotated_pose(board, matrix, origin_x, rotation)
        if pose is None:
            continue
        left, right = shift_range(board, pose)
        for x in range(left, right + 1):
            dropped = simulate_drop(board, pose.matrix, x)
            if dropped is None:
                continue
            result, lines, y = dropped
            moves.append(
                Move(
                    board=result,
                    lines_cleared=lines,
                    actions=action_sequence(pose.x, x, rotation),
                    matrix=pose.matrix,
                    x=x,
                    y=y,
                    rotation=rotation,
                )
            )
    moves.sort(key=lambda m: m.lines_cleared, reverse=True)
    return moves
