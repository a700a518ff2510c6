from __future__ import annotations

from typing import Dict

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_autoplay.ai.moves import ROTATION_STATES, Move, generate_moves
from tetris_autoplay.game import as_occupancy


class PlacementActionWrapper(gym.Wrapper):
    """Turns primitive-action Tetris into one decision per piece.

    Action `rotation * width + x` places the falling piece after `rotation`
    clockwise turns with its left edge at column `x`; the wrapper replays the
    planned primitive sequence on the inner env and sums the rewards.
    Exposes `get_action_mask()` returning a boolean mask of shape (4 * width,).
    """

    def __init__(self, env: gym.Env, invalid_action_penalty: float = -1.0):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.Discrete)
        self.width = int(env.unwrapped.game.config.width)
        self.rot = ROTATION_STATES
        self.n = self.rot * self.width
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.action_space = spaces.Discrete(self.n)

    def _candidates(self) -> Dict[int, Move]:
        game = self.env.unwrapped.game
        piece = game.current_piece
        if piece is None or game.game_over:
            return {}
        out: Dict[int, Move] = {}
        for move in generate_moves(as_occupancy(game.grid.grid), piece.matrix, piece.x):
            # Symmetric pieces repeat placements; keep the first of each index
            out.setdefault(move.rotation * self.width + move.x, move)
        return out

    def get_action_mask(self) -> np.ndarray:
        mask = np.zeros((self.n,), dtype=np.bool_)
        for idx in self._candidates():
            mask[idx] = True
        return mask

    def step(self, action):  # type: ignore[override]
        move = self._candidates().get(int(action))
        if move is None:
            obs = self.env.unwrapped._get_obs()
            info = self.env.unwrapped._get_info()
            info["invalid_action"] = True
            return obs, self.invalid_action_penalty, bool(self.env.unwrapped.game.game_over), False, info

        total = 0.0
        obs, info = None, {}
        terminated = truncated = False
        for primitive in move.actions:
            obs, reward, terminated, truncated, info = self.env.step(int(primitive))
            total += float(reward)
            if terminated or truncated:
                break
        info["invalid_action"] = False
        info["placement"] = {"rotation": move.rotation, "x": move.x, "y": move.y}
        return obs, total, terminated, truncated, info
