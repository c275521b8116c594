"""Metaheuristic search for optimal exposure designs."""

from .criteria import (
    AOptimality,
    DOptimality,
    ObjectiveEvaluator,
    SingularMatrix,
    get_criterion,
)
from .design import (
    Design,
    InvalidDesign,
    as_design,
    canonical,
    endpoint_split,
    format_design,
    parse_design,
    two_point_design,
)
from .interface import DesignOptimiser, DesignProblem, run_optimisation
from .problem import ExposureDesignProblem
from .strategies import (
    AnnealingConfig,
    GeneticAlgorithm,
    GeneticAlgorithmConfig,
    ParticleSwarm,
    ParticleSwarmConfig,
    RandomSearch,
    RandomSearchConfig,
    SearchStrategy,
    SimulatedAnnealing,
    build_strategy,
)
from .experiment import DesignSummary, RunResult, format_summary, run_many, summarise
from .parallel import run_many_parallel

__all__ = [
    "ObjectiveEvaluator",
    "AOptimality",
    "DOptimality",
    "SingularMatrix",
    "get_criterion",
    "Design",
    "InvalidDesign",
    "as_design",
    "canonical",
    "endpoint_split",
    "format_design",
    "parse_design",
    "two_point_design",
    "DesignProblem",
    "DesignOptimiser",
    "run_optimisation",
    "ExposureDesignProblem",
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
    "RunResult",
    "DesignSummary",
    "run_many",
    "run_many_parallel",
    "summarise",
    "format_summary",
]
