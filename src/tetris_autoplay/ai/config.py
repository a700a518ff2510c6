from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Dict, Mapping


@dataclass(frozen=True)
class HeuristicWeights:
    """Tunable coefficients of the board evaluation. Penalties are negative."""

    # Height-related terms
    aggregate_height: float = -0.55
    max_height: float = -1.0
    height_variance: float = -0.4
    danger_height: int = 15  # max height only counts once it exceeds this many rows

    # Line clears: 1 -> base, 2 -> base * double, 3 -> base * triple, 4 -> flat tetris bonus
    line_clear: float = 1.1
    double_clear_multiplier: float = 2.5
    triple_clear_multiplier: float = 5.0
    tetris_clear: float = 4.0

    # Structure
    holes: float = -1.3
    blocked_holes: float = -1.8

    # Surface
    bumpiness: float = -0.5
    well_depth: float = -0.75

    # Rows one cell short of clearing
    placement: float = 0.3
    near_complete_row_scale: float = 0.5

    def with_overrides(self, overrides: Mapping[str, float]) -> "HeuristicWeights":
        """Copy with some weights replaced; unknown names raise KeyError."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise KeyError(f"unknown heuristic weight(s): {', '.join(unknown)}")
        values = {
            name: int(value) if name == "danger_height" else float(value)
            for name, value in overrides.items()
        }
        return replace(self, **values)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class AIConfig:
    weights: HeuristicWeights = field(default_factory=HeuristicWeights)
    # Reserved for deeper search; the policy currently looks one piece ahead
    lookahead_depth: int = 4
    exploration_depth: int = 5


DEFAULT_CONFIG = AIConfig()
