from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from tetris_autoplay.game import column_heights

from .config import HeuristicWeights


@dataclass(frozen=True)
class BoardFeatures:
    aggregate_height: int
    max_height: int
    height_variance: float
    holes: int
    blocked_holes: int
    bumpiness: int
    well_depth: int
    near_complete_rows: float
    lines_cleared: int


def count_holes(board: np.ndarray) -> int:
    """Empty cells with at least one filled cell above them in the same column."""
    filled = board != 0
    covered = np.logical_or.accumulate(filled, axis=0)
    return int(np.count_nonzero(covered & ~filled))


def count_blocked_holes(board: np.ndarray) -> int:
    """Holes whose left and right neighbours both exist and are filled."""
    filled = board != 0
    holes = np.logical_or.accumulate(filled, axis=0) & ~filled
    if board.shape[1] < 3:
        return 0
    blocked = holes[:, 1:-1] & filled[:, :-2] & filled[:, 2:]
    return int(np.count_nonzero(blocked))


def bumpiness(heights: Sequence[int]) -> int:
    return int(np.abs(np.diff(np.asarray(heights))).sum())


def well_depth(heights: Sequence[int]) -> int:
    """Sum over columns lower than both neighbours of the gap to the shallower one."""
    depth = 0
    n = len(heights)
    for i, h in enumerate(heights):
        left = heights[i - 1] if i > 0 else math.inf
        right = heights[i + 1] if i < n - 1 else math.inf
        if h < left and h < right:
            shallower = min(left, right)
            if shallower != math.inf:
                depth += int(shallower - h)
    return depth


def near_complete_rows(board: np.ndarray, row_scale: float) -> float:
    empty = np.count_nonzero(board == 0, axis=1)
    close = empty[empty <= 2]
    return float(((2 - close) * row_scale).sum())


def extract_features(board: np.ndarray, lines_cleared: int, row_scale: float = 0.5) -> BoardFeatures:
    heights = column_heights(board)
    return BoardFeatures(
        aggregate_height=int(heights.sum()),
        max_height=int(heights.max()) if heights.size else 0,
        height_variance=float(np.var(heights)) if heights.size else 0.0,
        holes=count_holes(board),
        blocked_holes=count_blocked_holes(board),
        bumpiness=bumpiness(heights),
        well_depth=well_depth([int(h) for h in heights]),
        near_complete_rows=near_complete_rows(board, row_scale),
        lines_cleared=int(lines_cleared),
    )


class HeuristicEvaluator:
    """Scores the board left behind by a placement. Higher is better."""

    def __init__(self, weights: Optional[HeuristicWeights] = None) -> None:
        self.weights = weights or HeuristicWeights()

    def line_clear_bonus(self, lines: int) -> float:
        w = self.weights
        if lines == 1:
            return w.line_clear
        if lines == 2:
            return w.line_clear * w.double_clear_multiplier
        if lines == 3:
            return w.line_clear * w.triple_clear_multiplier
        if lines >= 4:
            return w.tetris_clear
        return 0.0

    def score_features(self, f: BoardFeatures) -> float:
        w = self.weights
        danger = f.max_height if f.max_height > w.danger_height else 0
        return (
            w.aggregate_height * f.aggregate_height
            + w.max_height * danger
            + w.height_variance * f.height_variance
            + self.line_clear_bonus(f.lines_cleared)
            + w.holes * f.holes
            + w.blocked_holes * f.blocked_holes
            + w.bumpiness * f.bumpiness
            + w.well_depth * f.well_depth
            + w.placement * f.near_complete_rows
        )

    def features(self, board: np.ndarray, lines_cleared: int) -> BoardFeatures:
        return extract_features(board, lines_cleared, self.weights.near_complete_row_scale)

    def score(self, board: np.ndarray, lines_cleared: int) -> float:
        return self.score_features(self.features(board, lines_cleared))
