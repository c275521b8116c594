"""Search strategy contract shared by every metaheuristic adapter."""
from __future__ import annotations

from typing import Protocol, Tuple

import numpy as np

from optimal_design.criteria import ObjectiveEvaluator
from optimal_design.design import Bounds, Design, InvalidDesign, resolve_bounds


class SearchStrategy(Protocol):
    """Produce one design for an evaluator inside a box.

    Implementations must be deterministic given ``seed``: all randomness comes
    from a generator built from the seed for this call only.
    """

    name: str

    def optimise(
        self,
        evaluator: ObjectiveEvaluator,
        lower_bounds: Bounds,
        upper_bounds: Bounds,
        seed: int,
    ) -> Design:
        ...


def design_box(lower_bounds: Bounds, upper_bounds: Bounds) -> Tuple[np.ndarray, np.ndarray]:
    """Per-unit bounds for a search; the box fixes the number of units."""

    lo, hi = resolve_bounds(lower_bounds, upper_bounds)
    if lo.size < 2:
        raise InvalidDesign("search bounds must cover at least two units")
    pinned = np.flatnonzero(lo >= hi)
    if pinned.size:
        raise InvalidDesign(f"units {pinned.tolist()} have no room to search: lower bound must be below upper bound")
    return lo, hi
