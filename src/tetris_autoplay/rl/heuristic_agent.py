from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

from tetris_autoplay.ai import AIConfig, AutoPlayConfig, AutoPlayer, AutoplayStats, HeuristicWeights
from tetris_autoplay.game import GameConfig, TetrisGame


def parse_weight_overrides(items: List[str]) -> Dict[str, float]:
    overrides: Dict[str, float] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {item!r}")
        try:
            overrides[name.strip()] = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"weight {name!r} needs a number, got {value!r}") from None
    return overrides


def run_autoplay(
    pieces: int = 500,
    seed: Optional[int] = 0,
    weights: Optional[HeuristicWeights] = None,
    full_sequence: bool = True,
    width: int = 10,
    height: int = 20,
) -> AutoplayStats:
    game = TetrisGame(GameConfig(width=width, height=height, random_seed=seed))
    config = AIConfig(weights=weights or HeuristicWeights())
    player = AutoPlayer(game, config, AutoPlayConfig(execute_full_sequence=full_sequence))
    return player.run(pieces)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Let the heuristic engine play a headless game")
    p.add_argument("--pieces", type=int, default=500)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--weight", action="append", default=[], metavar="NAME=VALUE",
                   help="Override one heuristic weight, e.g. --weight holes=-2.0 (repeatable)")
    p.add_argument("--first-action-only", action="store_true",
                   help="Apply only the first action of each decision and re-plan, like the browser loop")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(message)s",
    )
    try:
        weights = HeuristicWeights().with_overrides(parse_weight_overrides(args.weight))
    except (argparse.ArgumentTypeError, KeyError) as exc:
        parser.error(str(exc))

    stats = run_autoplay(
        pieces=args.pieces,
        seed=args.seed,
        weights=weights,
        full_sequence=not args.first_action_only,
        width=args.width,
        height=args.height,
    )
    print(
        f"Heuristic agent: pieces={stats.pieces} lines={stats.lines} score={stats.score} "
        f"level={stats.level} holds={stats.holds} game_over={stats.game_over}"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
