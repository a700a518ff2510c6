from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from tetris_autoplay.game import Action, GameSnapshot, InvalidSnapshotError, as_occupancy, spawn_column

from .config import DEFAULT_CONFIG, AIConfig
from .evaluator import HeuristicEvaluator
from .moves import generate_moves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    action: Action
    full_action_sequence: Tuple[Action, ...] = ()
    score: float = -math.inf

    @property
    def is_hold(self) -> bool:
        return self.action == Action.HOLD

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"action": self.action.wire_name}
        if self.full_action_sequence:
            out["fullActionSequence"] = [a.wire_name for a in self.full_action_sequence]
        return out


# Returned when no rotation/column combination fits and hold is unavailable
FALLBACK_DECISION = Decision(action=Action.MOVE_LEFT)


def evaluate_hold(snapshot: GameSnapshot, evaluator: HeuristicEvaluator) -> float:
    """Best score reachable by swapping in the held piece; -inf when hold is unavailable."""
    if snapshot.hold_piece is None or not snapshot.can_hold:
        return -math.inf
    board = as_occupancy(snapshot.board)
    origin_x = spawn_column(snapshot.width, snapshot.hold_piece)
    moves = generate_moves(board, snapshot.hold_piece, origin_x)
    if not moves:
        return -math.inf
    return max(evaluator.score(move.board, move.lines_cleared) for move in moves)


def find_best_move(snapshot: GameSnapshot, config: Optional[AIConfig] = None) -> Decision:
    """Pick the best action for the falling piece, or `hold` when swapping scores higher.

    Pure function of the snapshot: every candidate placement is scored by the
    heuristic evaluator and the first maximum in candidate order wins.
    """
    if not isinstance(snapshot, GameSnapshot):
        raise InvalidSnapshotError(f"expected a GameSnapshot, got {type(snapshot).__name__}")
    config = config or DEFAULT_CONFIG
    evaluator = HeuristicEvaluator(config.weights)

    board = as_occupancy(snapshot.board)
    piece = snapshot.current_piece
    best = FALLBACK_DECISION
    for move in generate_moves(board, piece.matrix, piece.x):
        move_score = evaluator.score(move.board, move.lines_cleared)
        if move_score > best.score:
            best = Decision(action=move.actions[0], full_action_sequence=move.actions, score=move_score)

    hold_score = evaluate_hold(snapshot, evaluator)
    if hold_score > best.score:
        logger.debug("Holding: hold score %.3f beats placement score %.3f", hold_score, best.score)
        return Decision(action=Action.HOLD, score=hold_score)

    if best is FALLBACK_DECISION:
        logger.debug("No placement fits the board; falling back to %s", best.action.wire_name)
    else:
        logger.debug(
            "Placement score %.3f via %s",
            best.score,
            " ".join(a.wire_name for a in best.full_action_sequence),
        )
    return best


def get_ai_move(game_state: Dict[str, Any], config: Optional[AIConfig] = None) -> Dict[str, Any]:
    """Wire-level entry point: host game-state mapping in, decision mapping out."""
    return find_best_move(GameSnapshot.from_mapping(game_state), config).to_dict()
