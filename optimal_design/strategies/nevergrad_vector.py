"""Adapter for Nevergrad optimisers over bounded design vectors.

This module provides a thin :class:`DesignOptimiser` implementation that
wraps any Nevergrad optimiser family (particle swarm, evolution strategy,
...) for problems whose designs are fixed-length float vectors inside a box.
Candidates come from Nevergrad's ask/tell API; the adapter remembers which
Nevergrad candidate produced each proposed design so the score can be told
back to the right one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import nevergrad as ng
import numpy as np

from optimal_design.criteria import ObjectiveEvaluator
from optimal_design.design import Bounds, Design, clip_design
from optimal_design.interface import DesignOptimiser, DesignProblem, ScoredDesign, run_optimisation
from optimal_design.problem import ExposureDesignProblem
from optimal_design.strategies.base import design_box


def bounded_array(lower: np.ndarray, upper: np.ndarray, seed: int) -> ng.p.Array:
    """Nevergrad parametrization of the box, seeded for this run only."""

    param = ng.p.Array(init=(lower + upper) / 2.0, lower=lower, upper=upper)
    param.random_state = np.random.RandomState(seed)
    return param


@dataclass
class NevergradVectorOptimiser(DesignOptimiser):
    """Drive a Nevergrad optimiser family through the ask/tell seam.

    ``family`` is a configured Nevergrad optimiser (e.g.
    ``ng.families.ConfPSO(popsize=40)``); it is instantiated lazily with the
    seeded parametrization and the evaluation budget.
    """

    family: Any
    lower: np.ndarray
    upper: np.ndarray
    budget: int
    seed: int = 0

    _optimizer: Any = field(default=None, init=False)
    _pending: Dict[Design, Any] = field(default_factory=dict, init=False)
    _best: Optional[ScoredDesign] = field(default=None, init=False)

    def _ensure_optimizer(self) -> None:
        if self._optimizer is not None:
            return
        parametrization = bounded_array(self.lower, self.upper, self.seed)
        self._optimizer = self.family(parametrization=parametrization, budget=self.budget, num_workers=1)

    def propose_candidate(self, problem: DesignProblem) -> Design:  # noqa: ARG002
        self._ensure_optimizer()
        candidate = self._optimizer.ask()
        design = tuple(float(v) for v in np.asarray(candidate.value, dtype=float))
        self._pending[design] = candidate
        return design

    def record_result(self, design: Design, score: float) -> None:
        candidate = self._pending.pop(tuple(design), None)
        if candidate is not None:
            # Nevergrad minimises, scores are maximised.
            self._optimizer.tell(candidate, -score)

        if self._best is None or score > self._best[1]:
            self._best = (design, score)

    def current_best(self) -> Optional[ScoredDesign]:
        return self._best


def run_nevergrad(
    family: Any,
    budget: int,
    evaluator: ObjectiveEvaluator,
    lower_bounds: Bounds,
    upper_bounds: Bounds,
    seed: int,
) -> Design:
    """Run ``family`` for ``budget`` evaluations and return the best design."""

    lo, hi = design_box(lower_bounds, upper_bounds)
    problem = ExposureDesignProblem(
        evaluator=evaluator,
        lower=lo,
        upper=hi,
        units=lo.size,
        rng=np.random.default_rng(seed),
    )
    optimiser = NevergradVectorOptimiser(family=family, lower=lo, upper=hi, budget=budget, seed=seed)
    best = run_optimisation(problem, optimiser, max(1, budget))
    assert best is not None
    return clip_design(best[0], lo, hi)
