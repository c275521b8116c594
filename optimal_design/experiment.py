"""Repeated runs of a search strategy and their summary.

A single metaheuristic run says little about a stochastic method, so the
runner repeats a strategy over a sequence of seeds and counts how often each
(sorted, rounded) design comes back. A strategy that has converged on the
optimum returns the same design for nearly every seed.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from itertools import islice
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .criteria import ObjectiveEvaluator
from .design import Bounds, Design, canonical, endpoint_split
from .strategies.base import SearchStrategy


@dataclass(frozen=True)
class RunResult:
    """Outcome of one strategy run. ``design`` is stored sorted."""

    design: Design
    criterion: str
    strategy: str
    seed: int
    score: float


@dataclass(frozen=True)
class DesignSummary:
    """Frequency table of canonical designs across repeated runs."""

    counts: Mapping[Design, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def most_common(self, n: Optional[int] = None) -> List[Tuple[Design, int]]:
        return Counter(self.counts).most_common(n)

    def consensus(self) -> float:
        """Share of runs that returned the modal design (0.0 when empty)."""

        if not self.counts:
            return 0.0
        return max(self.counts.values()) / self.total

    def endpoint_splits(
        self,
        lower: float = 0.0,
        upper: float = 1.0,
        atol: float = 1e-6,
    ) -> Dict[Tuple[int, int, int], int]:
        """Run counts keyed by ``(units at lower, units at upper, interior units)``."""

        splits: Counter = Counter()
        for design, count in self.counts.items():
            splits[endpoint_split(design, lower, upper, atol)] += count
        return dict(splits)


def run_once(
    strategy: SearchStrategy,
    evaluator: ObjectiveEvaluator,
    lower_bounds: Bounds,
    upper_bounds: Bounds,
    seed: int,
) -> RunResult:
    design = canonical(strategy.optimise(evaluator, lower_bounds, upper_bounds, seed))
    return RunResult(
        design=design,
        criterion=evaluator.name,
        strategy=strategy.name,
        seed=int(seed),
        score=evaluator.score(design),
    )


def take_seeds(seeds: Iterable[int], run_count: int) -> List[int]:
    """First ``run_count`` seeds, failing if the sequence runs short."""

    taken = [int(s) for s in islice(iter(seeds), max(run_count, 0))]
    if len(taken) < run_count:
        raise ValueError(f"{run_count} runs requested but only {len(taken)} seeds supplied")
    return taken


def run_many(
    strategy: SearchStrategy,
    evaluator: ObjectiveEvaluator,
    lower_bounds: Bounds,
    upper_bounds: Bounds,
    run_count: int,
    seeds: Optional[Iterable[int]] = None,
) -> List[RunResult]:
    """Run ``strategy`` once per seed, sequentially.

    ``seeds`` defaults to ``0, 1, 2, ...``. Only the first ``run_count`` seeds
    are consumed, so an unbounded iterator is fine.
    """

    if run_count <= 0:
        return []
    seed_list = take_seeds(range(run_count) if seeds is None else seeds, run_count)
    return [run_once(strategy, evaluator, lower_bounds, upper_bounds, seed) for seed in seed_list]


def summarise(results: Sequence[RunResult], decimals: Optional[int] = None) -> DesignSummary:
    """Count canonical designs, rounding to ``decimals`` places when given."""

    counts: Counter = Counter(canonical(r.design, decimals) for r in results)
    return DesignSummary(counts=dict(counts))


def format_summary(
    summary: DesignSummary,
    top: int = 5,
    lower: float = 0.0,
    upper: float = 1.0,
) -> str:
    """Human-readable frequency table, most frequent design first."""

    lines = [f"{summary.total} runs, consensus {summary.consensus():.0%}"]
    for design, count in summary.most_common(top):
        low, high, interior = endpoint_split(design, lower, upper)
        lines.append(f"  {count:>4}x  lower={low} upper={high} interior={interior}  {list(design)}")
    return "\n".join(lines)
