"""Optimality criteria for simple linear regression designs.

For a design ``x = (x_1, ..., x_L)`` the model ``y = b0 + b1 x`` has design
matrix ``X = [1, x]`` (``L x 2``) and information matrix ``M = X'X``. The
covariance of the least-squares estimate is proportional to ``inv(M)``, so

* A-optimality minimises ``trace(inv(M))`` (average parameter variance);
* D-optimality maximises ``det(M)``, which we express as minimising
  ``det(inv(M))`` so that every criterion here is minimised.

For ``L = 20`` on ``[0, 1]`` the D-optimal design puts 10 units at each end.
The A-optimal design is asymmetric because of the intercept: 12 units at 0 and
8 at 1 (trace 0.2917, against 0.3 for the 10/10 split).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Sequence, Type

import numpy as np


class SingularMatrix(np.linalg.LinAlgError):
    """The information matrix of a design cannot be inverted."""


def design_matrix(design: Sequence[float]) -> np.ndarray:
    """Return the ``L x 2`` model matrix with an intercept column."""

    x = np.asarray(design, dtype=float)
    if x.ndim != 1 or x.size < 2:
        raise ValueError("a design needs at least two units")
    if not np.all(np.isfinite(x)):
        raise ValueError("design values must be finite")
    return np.column_stack([np.ones(x.size), x])


def information_matrix(design: Sequence[float]) -> np.ndarray:
    X = design_matrix(design)
    return X.T @ X


def inverse_information(design: Sequence[float]) -> np.ndarray:
    """Invert ``X'X``, raising :class:`SingularMatrix` for degenerate designs."""

    M = information_matrix(design)
    if np.linalg.matrix_rank(M) < M.shape[0]:
        raise SingularMatrix("information matrix is singular; the design needs two distinct levels")
    try:
        return np.linalg.inv(M)
    except np.linalg.LinAlgError as exc:
        raise SingularMatrix(str(exc)) from exc


class ObjectiveEvaluator(ABC):
    """Stateless design criterion. Lower scores are better."""

    name: str = ""

    @abstractmethod
    def score(self, design: Sequence[float]) -> float:
        ...

    def __call__(self, design: Sequence[float]) -> float:
        return self.score(design)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AOptimality(ObjectiveEvaluator):
    """Trace of the inverse information matrix."""

    name = "A"

    def score(self, design: Sequence[float]) -> float:
        return float(np.trace(inverse_information(design)))


class DOptimality(ObjectiveEvaluator):
    """Determinant of the inverse information matrix."""

    name = "D"

    def score(self, design: Sequence[float]) -> float:
        return float(np.linalg.det(inverse_information(design)))


_CRITERIA: Dict[str, Type[ObjectiveEvaluator]] = {
    "a": AOptimality,
    "a-optimality": AOptimality,
    "a_optimality": AOptimality,
    "d": DOptimality,
    "d-optimality": DOptimality,
    "d_optimality": DOptimality,
}


def get_criterion(name: str) -> ObjectiveEvaluator:
    """Resolve a criterion name such as ``"A"`` or ``"d-optimality"``."""

    try:
        return _CRITERIA[name.strip().lower()]()
    except KeyError:
        raise ValueError(f"Unknown optimality criterion: {name!r}") from None
