from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Deque, Dict, Optional, Tuple

import numpy as np

from .grid import GameGrid, rotate_with_nudge
from .pieces import BagRandomizer, Piece, TetrominoType, spawn_column
from .rules import ScoringRules
from .state import GameSnapshot, InvalidSnapshotError

logger = logging.getLogger(__name__)


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    HOLD = 5

    @property
    def wire_name(self) -> str:
        return _WIRE_NAMES[self]

    @classmethod
    def from_wire(cls, name: str) -> "Action":
        try:
            return _WIRE_ACTIONS[name]
        except KeyError:
            raise ValueError(f"unknown action {name!r}") from None


_WIRE_NAMES: Dict[Action, str] = {
    Action.MOVE_LEFT: "moveLeft",
    Action.MOVE_RIGHT: "moveRight",
    Action.ROTATE: "rotate",
    Action.SOFT_DROP: "softDrop",
    Action.HARD_DROP: "hardDrop",
    Action.HOLD: "hold",
}
_WIRE_ACTIONS: Dict[str, Action] = {name: action for action, name in _WIRE_NAMES.items()}


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    preview_count: int = 1


class TetrisGame:
    """Headless falling-block game.

    Implements the primitives an autoplay decision is applied with, so a
    planned action sequence lands exactly where the move search predicted.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.bag = BagRandomizer(self.rng)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.next_queue: Deque[TetrominoType] = deque()
        self.current_piece: Optional[Piece] = None
        self.hold_piece: Optional[Piece] = None
        self.can_hold = True
        self.score = 0
        self.level = 1
        self.lines = 0
        self.pieces_placed = 0
        self.game_over = False
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.bag = BagRandomizer(self.rng)
        self.grid.reset()
        self.next_queue.clear()
        for _ in range(max(1, self.config.preview_count)):
            self.next_queue.append(self.bag.next_kind())
        self.hold_piece = None
        self.can_hold = True
        self.score = 0
        self.level = 1
        self.lines = 0
        self.pieces_placed = 0
        self.game_over = False
        self._spawn_next()

    # ---------- Piece lifecycle ----------
    def _spawn_next(self) -> None:
        kind = self.next_queue.popleft()
        self.next_queue.append(self.bag.next_kind())
        self._spawn(Piece.spawn(kind, self.grid.width))
        self.can_hold = True

    def _spawn(self, piece: Piece) -> None:
        self.current_piece = piece
        if self.grid.collides(piece):
            self.game_over = True
            logger.info("Game over: score=%d lines=%d pieces=%d", self.score, self.lines, self.pieces_placed)

    def _lock_piece(self) -> int:
        if self.current_piece is None:
            return 0
        result = self.grid.lock(self.current_piece)
        lines = result.lines_cleared
        self.pieces_placed += 1
        if lines:
            self.lines += lines
            self.score += self.rules.score_for_lines(lines, self.level)
            self.level = self.rules.level_for_lines(self.lines)
        self._spawn_next()
        return lines

    # ---------- Primitives ----------
    def move(self, dx: int) -> bool:
        if self.current_piece is None or self.game_over:
            return False
        moved = self.current_piece.moved(dx=dx)
        if self.grid.collides(moved):
            return False
        self.current_piece = moved
        return True

    def rotate(self) -> bool:
        """Rotate clockwise with the sideways nudge of `rotate_with_nudge`."""
        if self.current_piece is None or self.game_over:
            return False
        turned = rotate_with_nudge(self.grid.grid, self.current_piece)
        if turned is None:
            return False
        self.current_piece = turned
        return True

    def soft_drop(self) -> int:
        """Move down one row; lock when blocked. Returns lines cleared by a lock."""
        if self.current_piece is None or self.game_over:
            return 0
        lowered = self.current_piece.moved(dy=1)
        if not self.grid.collides(lowered):
            self.current_piece = lowered
            return 0
        return self._lock_piece()

    def hard_drop(self) -> int:
        if self.current_piece is None or self.game_over:
            return 0
        while not self.grid.collides(self.current_piece.moved(dy=1)):
            self.current_piece = self.current_piece.moved(dy=1)
        return self._lock_piece()

    def hold(self) -> bool:
        """Swap the falling piece with the held one, once per spawned piece."""
        if self.current_piece is None or self.game_over or not self.can_hold:
            return False
        outgoing = self.current_piece
        if self.hold_piece is None:
            self.hold_piece = Piece(outgoing.matrix, 0, 0, outgoing.kind)
            self._spawn_next()
        else:
            incoming = self.hold_piece
            self.hold_piece = Piece(outgoing.matrix, 0, 0, outgoing.kind)
            self._spawn(Piece(incoming.matrix, spawn_column(self.grid.width, incoming.matrix), 0, incoming.kind))
        self.can_hold = False
        return True

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.game_over:
            return self.get_state(), 0, True, self._info()

        score_before = self.score
        action = Action(action)
        if action == Action.MOVE_LEFT:
            self.move(-1)
        elif action == Action.MOVE_RIGHT:
            self.move(1)
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.HOLD:
            self.hold()

        reward = self.score - score_before
        return self.get_state(), reward, self.game_over, self._info()

    # ---------- Views ----------
    def _info(self) -> dict:
        return {
            "score": self.score,
            "lines": self.lines,
            "level": self.level,
            "pieces_placed": self.pieces_placed,
        }

    def snapshot(self) -> GameSnapshot:
        if self.current_piece is None:
            raise InvalidSnapshotError("no falling piece to snapshot")
        return GameSnapshot(
            board=self.grid.clone_state(),
            current_piece=self.current_piece,
            next_pieces=tuple(Piece.spawn(kind, self.grid.width).matrix for kind in self.next_queue),
            hold_piece=None if self.hold_piece is None else self.hold_piece.matrix,
            can_hold=self.can_hold,
            score=self.score,
            level=self.level,
            lines=self.lines,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            value = -int(self.current_piece.kind) if self.current_piece.kind is not None else -1
            for x, y in self.current_piece.cells():
                if 0 <= y < self.grid.height and 0 <= x < self.grid.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = value
        return state
