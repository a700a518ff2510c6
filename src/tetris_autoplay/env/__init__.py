"""Gymnasium environments for Tetris autoplay."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Primitive-action environment (6 discrete actions)
register(
    id="Tetris-10x20-v0",
    entry_point="tetris_autoplay.env.tetris_env:TetrisEnv",
)

__all__ = ["Tetris-10x20-v0"]
