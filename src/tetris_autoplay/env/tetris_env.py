from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_autoplay.game import Action, GameConfig, TetrisGame


class TetrisEnv(gym.Env):
    """One primitive action per step, the same vocabulary the autoplay engine emits.

    Actions: 0 moveLeft, 1 moveRight, 2 rotate, 3 softDrop, 4 hardDrop, 5 hold.
    Reward is the change in game score, plus `step_penalty` every step and
    `terminal_penalty` when the game ends.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        step_penalty: float = 0.0,
        terminal_penalty: float = 0.0,
        max_episode_steps: int = 20000,
    ) -> None:
        super().__init__()
        self.game = TetrisGame(config)
        self.render_mode = render_mode
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        height = self.game.config.height
        width = self.game.config.width
        kinds = 8  # 0 = none, 1..7 = tetromino id

        # Falling piece is overlaid with negative ids
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-7, high=7, shape=(height, width), dtype=np.int8),
                "current": spaces.Discrete(kinds),
                "next": spaces.Discrete(kinds),
                "hold": spaces.Discrete(kinds),
                "can_hold": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(Action))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        game = self.game
        current = game.current_piece
        return {
            "board": game.get_state().astype(np.int8),
            "current": int(current.kind) if current is not None and current.kind is not None else 0,
            "next": int(game.next_queue[0]) if game.next_queue else 0,
            "hold": int(game.hold_piece.kind) if game.hold_piece is not None and game.hold_piece.kind else 0,
            "can_hold": int(game.can_hold),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines": self.game.lines,
            "level": self.game.level,
            "pieces_placed": self.game.pieces_placed,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        _, gained, terminated, _ = self.game.step(Action(int(action)))
        self._steps += 1
        reward = float(gained) + self.step_penalty
        if terminated:
            reward += self.terminal_penalty
        truncated = (not terminated) and self._steps >= self.max_episode_steps
        return self._get_obs(), reward, bool(terminated), truncated, self._get_info()

    def close(self) -> None:
        pass
