"""Pluggable search strategies.

Each strategy wraps an existing optimisation routine (SciPy's annealing,
Nevergrad's particle swarm and evolution strategy, plain random search) and
receives its control parameters as an explicit config dataclass.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .annealing import AnnealingConfig, SimulatedAnnealing
from .base import SearchStrategy
from .genetic import GeneticAlgorithm, GeneticAlgorithmConfig
from .random_search import RandomSearch, RandomSearchConfig
from .swarm import ParticleSwarm, ParticleSwarmConfig

_REGISTRY: Dict[str, Tuple[Callable[..., Any], type]] = {
    "simulated_annealing": (SimulatedAnnealing, AnnealingConfig),
    "particle_swarm": (ParticleSwarm, ParticleSwarmConfig),
    "genetic_algorithm": (GeneticAlgorithm, GeneticAlgorithmConfig),
    "random_search": (RandomSearch, RandomSearchConfig),
}

_ALIASES = {
    "sa": "simulated_annealing",
    "annealing": "simulated_annealing",
    "pso": "particle_swarm",
    "swarm": "particle_swarm",
    "ga": "genetic_algorithm",
    "genetic": "genetic_algorithm",
    "random": "random_search",
}


def build_strategy(
    kind: str,
    params: Optional[Mapping[str, Any]] = None,
    name: Optional[str] = None,
) -> SearchStrategy:
    """Build a strategy from its kind (``"pso"``, ``"genetic_algorithm"``, ...)."""

    key = kind.strip().lower().replace("-", "_")
    key = _ALIASES.get(key, key)
    if key not in _REGISTRY:
        raise ValueError(f"Unknown search strategy: {kind!r}")
    strategy_cls, config_cls = _REGISTRY[key]

    params = dict(params or {})
    known = {f.name for f in dataclasses.fields(config_cls)}
    unknown = sorted(set(params) - known)
    if unknown:
        raise ValueError(f"Unknown parameters for {key}: {', '.join(unknown)}")

    strategy = strategy_cls(config=config_cls(**params))
    if name:
        strategy.name = name
    return strategy


__all__ = [
    "SearchStrategy",
    "build_strategy",
    "SimulatedAnnealing",
    "AnnealingConfig",
    "ParticleSwarm",
    "ParticleSwarmConfig",
    "GeneticAlgorithm",
    "GeneticAlgorithmConfig",
    "RandomSearch",
    "RandomSearchConfig",
]
