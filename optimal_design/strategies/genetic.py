"""Genetic algorithm via Nevergrad's evolution strategy with recombination.

A population of ``popsize`` designs is kept per generation. Each offspring is,
with probability ``recombination_ratio``, a crossover of two parents, and is
then mutated; the best ``popsize`` individuals (parents and offspring, or
offspring only when ``only_offsprings``) survive to the next generation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import nevergrad as ng

from optimal_design.criteria import ObjectiveEvaluator
from optimal_design.design import Bounds, Design
from optimal_design.strategies.nevergrad_vector import run_nevergrad


@dataclass(frozen=True)
class GeneticAlgorithmConfig:
    budget: int = 2000
    popsize: int = 40
    offsprings: Optional[int] = None
    recombination_ratio: float = 0.5
    only_offsprings: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.recombination_ratio <= 1.0:
            raise ValueError("recombination_ratio must lie in [0, 1]")
        if self.only_offsprings and (self.offsprings or 0) < self.popsize:
            raise ValueError("only_offsprings needs at least popsize offsprings per generation")


@dataclass
class GeneticAlgorithm:
    config: GeneticAlgorithmConfig = field(default_factory=GeneticAlgorithmConfig)
    name: str = "genetic_algorithm"

    def family(self):
        return ng.families.EvolutionStrategy(
            recombination_ratio=self.config.recombination_ratio,
            popsize=self.config.popsize,
            offsprings=self.config.offsprings,
            only_offsprings=self.config.only_offsprings,
        )

    def optimise(
        self,
        evaluator: ObjectiveEvaluator,
        lower_bounds: Bounds,
        upper_bounds: Bounds,
        seed: int,
    ) -> Design:
        return run_nevergrad(self.family(), self.config.budget, evaluator, lower_bounds, upper_bounds, seed)
