from __future__ import annotations

import argparse
from typing import List, Optional

import gymnasium as gym

import tetris_autoplay.env  # noqa: F401  ensure registration
from tetris_autoplay.env.wrappers import PlacementActionWrapper


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    """Random valid placements; a baseline to compare the heuristic agent against."""
    env = PlacementActionWrapper(gym.make("Tetris-10x20-v0"))
    obs, info = env.reset(seed=seed)
    rng = env.np_random
    total_reward = 0.0
    for _ in range(steps):
        valid = env.get_action_mask().nonzero()[0]
        if valid.size:
            action = int(rng.choice(valid))
        else:
            action = int(env.action_space.sample())
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    return total_reward


def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Random placement baseline")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args(argv)
    total_reward = run_random(args.steps, args.seed)
    print(f"Random agent total reward: {total_reward:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
