"""Heuristic autoplay engine.

- generate_moves: every reachable final placement of a piece
- HeuristicEvaluator: weighted board scoring
- find_best_move: placement-or-hold decision for a GameSnapshot
- AutoPlayer: drives a TetrisGame with those decisions
"""

from .config import AIConfig, DEFAULT_CONFIG, HeuristicWeights
from .moves import Move, action_sequence, generate_moves
from .evaluator import BoardFeatures, HeuristicEvaluator, extract_features
from .policy import Decision, FALLBACK_DECISION, evaluate_hold, find_best_move, get_ai_move
from .autoplay import AutoPlayConfig, AutoPlayer, AutoplayStats

__all__ = [
    "AIConfig",
    "DEFAULT_CONFIG",
    "HeuristicWeights",
    "Move",
    "action_sequence",
    "generate_moves",
    "BoardFeatures",
    "HeuristicEvaluator",
    "extract_features",
    "Decision",
    "FALLBACK_DECISION",
    "evaluate_hold",
    "find_best_move",
    "get_ai_move",
    "AutoPlayConfig",
    "AutoPlayer",
    "AutoplayStats",
]
