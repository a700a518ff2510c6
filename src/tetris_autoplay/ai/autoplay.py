from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from tetris_autoplay.game import Action, GameSnapshot, TetrisGame

from .config import AIConfig, DEFAULT_CONFIG
from .policy import Decision, find_best_move

logger = logging.getLogger(__name__)


@dataclass
class AutoPlayConfig:
    # Apply the whole planned sequence per decision instead of only its first action
    execute_full_sequence: bool = True
    # Safety net for first-action-only play, where a piece needs several decisions
    max_decisions_per_piece: int = 64


@dataclass
class AutoplayStats:
    pieces: int
    lines: int
    score: int
    level: int
    decisions: int
    holds: int
    game_over: bool


class AutoPlayer:
    """Drives a TetrisGame with the heuristic policy.

    At most one decision is computed at a time: `processing` is set while a
    request is in flight and a new snapshot is only taken once the previous
    decision has been applied.
    """

    def __init__(
        self,
        game: TetrisGame,
        config: Optional[AIConfig] = None,
        play_config: Optional[AutoPlayConfig] = None,
    ) -> None:
        self.game = game
        self.config = config or DEFAULT_CONFIG
        self.play_config = play_config or AutoPlayConfig()
        self.processing = False
        self.decisions = 0
        self.holds = 0
        self._executor: Optional[ThreadPoolExecutor] = None

    # ---------- Deferred decisions ----------
    def request_decision(self) -> "Future[Decision]":
        """Compute a decision for the current game state in a worker thread."""
        if self.processing:
            raise RuntimeError("a decision is already being computed")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="autoplay")
        snapshot = self.game.snapshot()
        self.processing = True
        return self._executor.submit(self._compute, snapshot)

    def _compute(self, snapshot: GameSnapshot) -> Decision:
        try:
            return find_best_move(snapshot, self.config)
        except Exception:
            # Nothing will be applied, so the next request may go ahead
            self.processing = False
            logger.exception("Decision failed")
            raise

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "AutoPlayer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---------- Synchronous play ----------
    def decide(self) -> Decision:
        return find_best_move(self.game.snapshot(), self.config)

    def apply(self, decision: Decision) -> None:
        """Play a decision on the game and release the in-flight request, if any."""
        self.decisions += 1
        if decision.is_hold:
            self.holds += 1
        if self.play_config.execute_full_sequence and decision.full_action_sequence:
            for action in decision.full_action_sequence:
                self.game.step(action)
        else:
            self.game.step(decision.action)
        self.processing = False

    def play_piece(self) -> bool:
        """Keep deciding until the falling piece locks. Returns False once the game is over."""
        if self.game.game_over:
            return False
        placed = self.game.pieces_placed
        for _ in range(self.play_config.max_decisions_per_piece):
            self.apply(self.decide())
            if self.game.game_over or self.game.pieces_placed != placed:
                break
        else:
            logger.warning("Piece did not lock after %d decisions; hard dropping", self.play_config.max_decisions_per_piece)
            self.game.step(Action.HARD_DROP)
        return not self.game.game_over

    def run(self, max_pieces: int) -> AutoplayStats:
        while self.game.pieces_placed < max_pieces and self.play_piece():
            pass
        return self.stats()

    def stats(self) -> AutoplayStats:
        return AutoplayStats(
            pieces=self.game.pieces_placed,
            lines=self.game.lines,
            score=self.game.score,
            level=self.game.level,
            decisions=self.decisions,
            holds=self.holds,
            game_over=self.game.game_over,
        )
