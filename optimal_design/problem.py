"""Exposure-design search problem.

Wraps an :class:`~optimal_design.criteria.ObjectiveEvaluator` and a box of
bounds as a :class:`~optimal_design.interface.DesignProblem`, so the ask/tell
optimisers can drive it. Degenerate designs are common early in a search
(e.g. a swarm collapsing onto one level), so during search they receive
``SINGULAR_PENALTY`` instead of aborting the run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .criteria import ObjectiveEvaluator, SingularMatrix
from .design import Bounds, Design, as_design, resolve_bounds
from .interface import DesignProblem

SINGULAR_PENALTY = 1e10


def penalised_score(
    evaluator: ObjectiveEvaluator,
    design: Sequence[float],
    penalty: float = SINGULAR_PENALTY,
) -> float:
    """Criterion value to minimise, with ``penalty`` for singular designs."""

    try:
        return evaluator.score(design)
    except SingularMatrix:
        return penalty


@dataclass
class ExposureDesignProblem(DesignProblem):
    """Choose ``units`` exposure levels inside ``[lower, upper]``.

    ``evaluate`` returns the negated criterion so that, as for every
    :class:`DesignProblem`, higher scores are better.
    """

    evaluator: ObjectiveEvaluator
    lower: Bounds
    upper: Bounds
    units: int = 20
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    penalty: float = SINGULAR_PENALTY

    def __post_init__(self) -> None:
        self.lower, self.upper = resolve_bounds(self.lower, self.upper, self.units)

    def sample_one_design(self) -> Design:
        return as_design(self.rng.uniform(self.lower, self.upper), self.lower, self.upper)

    def evaluate(self, design: Design) -> float:
        return -penalised_score(self.evaluator, design, self.penalty)
