"""Particle swarm optimisation via Nevergrad's configurable PSO.

Each particle carries a position and a velocity; velocities are pulled towards
the particle's own best position (``phip``) and the swarm's best position
(``phig``) with inertia ``omega``. Nothing guarantees the swarm finds the
global optimum, which is why runs are repeated and summarised.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import nevergrad as ng

from optimal_design.criteria import ObjectiveEvaluator
from optimal_design.design import Bounds, Design
from optimal_design.strategies.nevergrad_vector import run_nevergrad


@dataclass(frozen=True)
class ParticleSwarmConfig:
    """Swarm control parameters. Defaults match Nevergrad's ``PSO``."""

    budget: int = 2000
    popsize: Optional[int] = None
    omega: float = 0.5 / math.log(2.0)
    phip: float = 0.5 + math.log(2.0)
    phig: float = 0.5 + math.log(2.0)


@dataclass
class ParticleSwarm:
    config: ParticleSwarmConfig = field(default_factory=ParticleSwarmConfig)
    name: str = "particle_swarm"

    def family(self):
        return ng.families.ConfPSO(
            transform="identity",
            popsize=self.config.popsize,
            omega=self.config.omega,
            phip=self.config.phip,
            phig=self.config.phig,
        )

    def optimise(
        self,
        evaluator: ObjectiveEvaluator,
        lower_bounds: Bounds,
        upper_bounds: Bounds,
        seed: int,
    ) -> Design:
        return run_nevergrad(self.family(), self.config.budget, evaluator, lower_bounds, upper_bounds, seed)
