"""Simulated annealing via SciPy's generalised annealing.

``scipy.optimize.dual_annealing`` draws new points from a distorted Cauchy
visiting distribution whose spread shrinks as the temperature
``T(k) = initial_temp * (2**(visit-1) - 1) / ((1+k)**(visit-1) - 1)`` cools
with iteration ``k``. Worse points are accepted with a probability governed
by ``accept``, which lets the search climb out of local optima; when the
temperature falls below ``initial_temp * restart_temp_ratio`` it reheats.
Unless ``no_local_search`` is set, accepted points are polished with L-BFGS-B.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from optimal_design.criteria import ObjectiveEvaluator
from optimal_design.design import Bounds, Design, clip_design
from optimal_design.problem import SINGULAR_PENALTY, penalised_score
from optimal_design.strategies.base import design_box


@dataclass(frozen=True)
class AnnealingConfig:
    """Annealing schedule. Defaults match ``dual_annealing``."""

    maxiter: int = 1000
    initial_temp: float = 5230.0
    restart_temp_ratio: float = 2e-5
    visit: float = 2.62
    accept: float = -5.0
    maxfun: int = 10_000_000
    no_local_search: bool = False

    def __post_init__(self) -> None:
        if not 0.01 < self.initial_temp <= 5e4:
            raise ValueError("initial_temp must lie in (0.01, 5e4]")
        if not 0.0 < self.restart_temp_ratio < 1.0:
            raise ValueError("restart_temp_ratio must lie in (0, 1)")
        if not 1.0 < self.visit <= 3.0:
            raise ValueError("visit must lie in (1, 3]")
        if not -1e4 <= self.accept <= -5.0:
            raise ValueError("accept must lie in [-1e4, -5]")


@dataclass
class SimulatedAnnealing:
    config: AnnealingConfig = field(default_factory=AnnealingConfig)
    name: str = "simulated_annealing"

    def optimise(
        self,
        evaluator: ObjectiveEvaluator,
        lower_bounds: Bounds,
        upper_bounds: Bounds,
        seed: int,
    ) -> Design:
        from scipy.optimize import dual_annealing

        lo, hi = design_box(lower_bounds, upper_bounds)
        cfg = self.config
        result = dual_annealing(
            lambda x: penalised_score(evaluator, x, SINGULAR_PENALTY),
            bounds=list(zip(lo, hi)),
            maxiter=cfg.maxiter,
            initial_temp=cfg.initial_temp,
            restart_temp_ratio=cfg.restart_temp_ratio,
            visit=cfg.visit,
            accept=cfg.accept,
            maxfun=cfg.maxfun,
            seed=seed,
            no_local_search=cfg.no_local_search,
        )
        return clip_design(result.x, lo, hi)
