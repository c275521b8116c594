"""Baseline strategy: random search over the design box.

Overview
--------
This optimiser performs pure Monte Carlo search with very simple behaviour:

* At each call to :meth:`RandomSearchOptimiser.propose_candidate`, it samples
  a design independently using :meth:`DesignProblem.sample_one_design`. The
  samples are i.i.d.; there is no adaptation based on previous results.
* It never builds a model of the design space; it simply keeps the best scored
  candidate seen so far.

With ``budget`` evaluations the search is equivalent to drawing ``budget``
independent designs and returning the one with the lowest criterion value.

Notes
-----
Uniform sampling almost never lands on the bounds, so random search cannot
reach the endpoint designs that are optimal for linear regression. It is kept
as the yardstick the metaheuristics have to beat.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from optimal_design.criteria import ObjectiveEvaluator
from optimal_design.design import Bounds, Design, clip_design
from optimal_design.interface import DesignOptimiser, DesignProblem, ScoredDesign, run_optimisation
from optimal_design.problem import ExposureDesignProblem
from optimal_design.strategies.base import design_box


@dataclass
class RandomSearchOptimiser(DesignOptimiser):
    """Optimiser that samples designs independently."""

    _best: Optional[ScoredDesign] = field(default=None, init=False)
    evaluations: int = field(default=0, init=False)

    def propose_candidate(self, problem: DesignProblem) -> Design:
        return problem.sample_one_design()

    def record_result(self, design: Design, score: float) -> None:
        self.evaluations += 1
        if self._best is None or score > self._best[1]:
            self._best = (design, score)

    def current_best(self) -> Optional[ScoredDesign]:
        return self._best


@dataclass(frozen=True)
class RandomSearchConfig:
    budget: int = 1000


@dataclass
class RandomSearch:
    """:class:`SearchStrategy` drawing ``config.budget`` uniform designs."""

    config: RandomSearchConfig = field(default_factory=RandomSearchConfig)
    name: str = "random_search"

    def optimise(
        self,
        evaluator: ObjectiveEvaluator,
        lower_bounds: Bounds,
        upper_bounds: Bounds,
        seed: int,
    ) -> Design:
        lo, hi = design_box(lower_bounds, upper_bounds)
        problem = ExposureDesignProblem(
            evaluator=evaluator,
            lower=lo,
            upper=hi,
            units=lo.size,
            rng=np.random.default_rng(seed),
        )
        best = run_optimisation(problem, RandomSearchOptimiser(), max(1, self.config.budget))
        assert best is not None
        return clip_design(best[0], lo, hi)
