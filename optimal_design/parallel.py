"""Parallel repeated runs.

Repeated runs are independent: each depends only on its own seed, and every
strategy builds its random source from that seed. They can therefore be
executed concurrently without changing results; the returned list is always
in seed order regardless of completion order.
"""
from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait, FIRST_COMPLETED
from typing import Dict, Iterable, List, Optional

from .criteria import ObjectiveEvaluator
from .design import Bounds
from .experiment import RunResult, run_once, take_seeds
from .strategies.base import SearchStrategy


def run_many_parallel(
    strategy: SearchStrategy,
    evaluator: ObjectiveEvaluator,
    lower_bounds: Bounds,
    upper_bounds: Bounds,
    run_count: int,
    seeds: Optional[Iterable[int]] = None,
    max_workers: int = 4,
    executor: Optional[Executor] = None,
) -> List[RunResult]:
    """Parallel counterpart of :func:`optimal_design.experiment.run_many`.

    Parameters
    ----------
    max_workers:
        Upper bound on the number of runs in flight when an internal
        :class:`ThreadPoolExecutor` is used.
    executor:
        Optional external :class:`concurrent.futures.Executor`. When provided,
        ``max_workers`` is ignored and the caller is responsible for sizing
        and shutting down the executor.

    Notes
    -----
    The first exception raised by a run (e.g. :class:`SingularMatrix` from
    scoring a degenerate result) propagates to the caller.
    """

    if run_count <= 0:
        return []
    seed_list = take_seeds(range(run_count) if seeds is None else seeds, run_count)

    if executor is None:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return _run_with_executor(strategy, evaluator, lower_bounds, upper_bounds, seed_list, pool)
    return _run_with_executor(strategy, evaluator, lower_bounds, upper_bounds, seed_list, executor)


def _run_with_executor(
    strategy: SearchStrategy,
    evaluator: ObjectiveEvaluator,
    lower_bounds: Bounds,
    upper_bounds: Bounds,
    seed_list: List[int],
    executor: Executor,
) -> List[RunResult]:
    in_flight: Dict[Future, int] = {
        executor.submit(run_once, strategy, evaluator, lower_bounds, upper_bounds, seed): index
        for index, seed in enumerate(seed_list)
    }
    results: List[Optional[RunResult]] = [None] * len(seed_list)

    while in_flight:
        done, _pending = wait(in_flight.keys(), return_when=FIRST_COMPLETED)
        for future in done:
            index = in_flight.pop(future)
            results[index] = future.result()

    return [r for r in results if r is not None]
