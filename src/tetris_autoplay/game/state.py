from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import numpy as np

from .pieces import Piece


class InvalidSnapshotError(ValueError):
    """Raised when a game snapshot is missing its board or falling piece."""


def _frozen_matrix(value: Any, name: str) -> np.ndarray:
    if value is None:
        raise InvalidSnapshotError(f"{name} is missing")
    try:
        arr = np.array(value)
    except ValueError as exc:  # ragged nested lists
        raise InvalidSnapshotError(f"{name} is not a rectangular matrix") from exc
    if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidSnapshotError(f"{name} must be a non-empty 2-D matrix, got shape {arr.shape}")
    if not np.issubdtype(arr.dtype, np.number) and arr.dtype != np.bool_:
        raise InvalidSnapshotError(f"{name} must hold numeric cells, got dtype {arr.dtype}")
    arr.setflags(write=False)
    return arr


def _piece_matrix(value: Any, name: str) -> np.ndarray:
    matrix = _frozen_matrix(value, name)
    if not matrix.any():
        raise InvalidSnapshotError(f"{name} has no filled cells")
    return matrix


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view of a game handed to the autoplay engine."""

    board: np.ndarray
    current_piece: Piece
    next_pieces: Tuple[np.ndarray, ...] = ()
    hold_piece: Optional[np.ndarray] = None
    can_hold: bool = True
    score: int = 0
    level: int = 1
    lines: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "board", _frozen_matrix(self.board, "board"))
        if self.current_piece is None:
            raise InvalidSnapshotError("current piece is missing")
        matrix = _piece_matrix(self.current_piece.matrix, "current piece matrix")
        object.__setattr__(
            self,
            "current_piece",
            Piece(matrix, int(self.current_piece.x), int(self.current_piece.y), self.current_piece.kind),
        )
        object.__setattr__(
            self,
            "next_pieces",
            tuple(_piece_matrix(m, f"next piece {i}") for i, m in enumerate(self.next_pieces)),
        )
        if self.hold_piece is not None:
            object.__setattr__(self, "hold_piece", _piece_matrix(self.hold_piece, "hold piece"))

    @property
    def width(self) -> int:
        return int(self.board.shape[1])

    @property
    def height(self) -> int:
        return int(self.board.shape[0])

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GameSnapshot":
        """Build a snapshot from the host's JSON-style game state.

        Expected keys: ``board``, ``currentPiece`` (``matrix`` and ``pos``
        with ``x``/``y``), ``nextPiece`` or ``nextPieces``, ``holdPiece``,
        ``canHold``, ``score``, ``level`` and ``lines``.
        """
        if not isinstance(data, Mapping):
            raise InvalidSnapshotError(f"game state must be a mapping, got {type(data).__name__}")
        if "board" not in data:
            raise InvalidSnapshotError("game state has no 'board'")
        current = data.get("currentPiece")
        if not isinstance(current, Mapping) or current.get("matrix") is None:
            raise InvalidSnapshotError("game state has no 'currentPiece' with a 'matrix'")
        pos = current.get("pos") or {}
        if "nextPieces" in data and data["nextPieces"] is not None:
            next_pieces = tuple(data["nextPieces"])
        elif data.get("nextPiece") is not None:
            next_pieces = (data["nextPiece"],)
        else:
            next_pieces = ()
        return cls(
            board=data["board"],
            current_piece=Piece(current["matrix"], int(pos.get("x", 0)), int(pos.get("y", 0))),
            next_pieces=next_pieces,
            hold_piece=data.get("holdPiece"),
            can_hold=bool(data.get("canHold", True)),
            score=int(data.get("score", 0)),
            level=int(data.get("level", 1)),
            lines=int(data.get("lines", 0)),
        )
