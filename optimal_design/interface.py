"""Generic design optimisation interfaces.

This module defines the ask/tell seam used to drive budgeted optimisers over
exposure designs. Concrete problems implement :class:`DesignProblem`; the
library-backed optimisers (Nevergrad swarms and evolution strategies, random
search) implement :class:`DesignOptimiser`.

A simple mental model is the exposure problem used throughout the tests:

* The design space is every vector ``x`` of ``L`` exposure levels in ``[0, 1]``.
* ``sample_one_design`` draws a candidate ``x`` uniformly from the box.
* ``evaluate(x)`` returns the *negated* optimality criterion (for example
  ``-trace(inv(X'X))``), so the best design has the highest score.
* A :class:`DesignOptimiser` proposes candidate ``x`` values, observes their
  scores, and keeps track of the best one it has seen.
"""
from __future__ import annotations

from typing import Optional, Protocol, Tuple

from .design import Design

# ``(design, score)`` with the score on the maximised scale.
ScoredDesign = Tuple[Design, float]


class DesignProblem(Protocol):
    """Optimisation problem over fixed-length exposure designs."""

    def sample_one_design(self) -> Design:
        """Return a single random design drawn from the problem's own RNG."""

        ...

    def evaluate(self, design: Design) -> float:
        """Return a scalar score for the given design.

        Higher scores are interpreted as "better" designs by optimisers. Design
        criteria are minimised, so problems return the negated criterion.
        """

        ...


class DesignOptimiser(Protocol):
    """Strategy for exploring a design space one candidate at a time."""

    def propose_candidate(self, problem: DesignProblem) -> Design:
        """Return a single candidate design that should be evaluated next."""

        ...

    def record_result(self, design: Design, score: float) -> None:
        """Record the score for a single evaluated design."""

        ...

    def current_best(self) -> Optional[ScoredDesign]:
        """Return the best design seen so far, or ``None`` before any result."""

        ...


def run_optimisation(
    problem: DesignProblem,
    optimiser: DesignOptimiser,
    budget: int,
) -> Optional[ScoredDesign]:
    """Budgeted ask/evaluate/tell loop over a design problem.

    ``budget`` is the total number of calls to :meth:`DesignProblem.evaluate`.
    The loop has no convergence logic of its own. Proposals are normalised to
    float tuples before scoring so optimisers may hand back arrays.
    """

    for _ in range(max(budget, 0)):
        design: Design = tuple(float(v) for v in optimiser.propose_candidate(problem))
        optimiser.record_result(design, float(problem.evaluate(design)))

    return optimiser.current_best()
