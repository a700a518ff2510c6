"""Game module for Tetris autoplay.

Exports the board model and the headless game engine:
- GameGrid plus the pure board helpers (collides, merge, clear_lines, column_heights)
- Piece, TetrominoType, rotate and the BagRandomizer
- ScoringRules: line-clear points and level progression
- GameSnapshot: read-only game state handed to the autoplay engine
- TetrisGame: headless engine implementing the host action primitives
"""

from .grid import GameGrid, as_occupancy, clear_lines, collides, column_heights, merge, rotate_with_nudge
from .pieces import PIECE_SHAPES, BagRandomizer, Piece, TetrominoType, rotate, shape_for, spawn_column
from .rules import ScoringRules
from .state import GameSnapshot, InvalidSnapshotError
from .core import Action, GameConfig, TetrisGame

__all__ = [
    "GameGrid",
    "as_occupancy",
    "clear_lines",
    "collides",
    "column_heights",
    "merge",
    "rotate_with_nudge",
    "PIECE_SHAPES",
    "BagRandomizer",
    "Piece",
    "TetrominoType",
    "rotate",
    "shape_for",
    "spawn_column",
    "ScoringRules",
    "GameSnapshot",
    "InvalidSnapshotError",
    "Action",
    "GameConfig",
    "TetrisGame",
]
