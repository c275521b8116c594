"""Exposure designs and their bounds.

A design is an immutable tuple of exposure levels, one per experimental unit.
Helpers here build and validate designs, produce the canonical (sorted,
optionally rounded) form used when counting outcomes, and serialise designs
for the run log.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

Design = Tuple[float, ...]
Bounds = Union[float, Sequence[float], np.ndarray]

# Separator used in serialised designs; ',' is reserved for the CSV layer.
DESIGN_SEPARATOR = ";"


class InvalidDesign(ValueError):
    """A design or its bounds do not describe a valid exposure vector."""


def resolve_bounds(
    lower: Bounds,
    upper: Bounds,
    size: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Broadcast scalar or per-unit bounds to two float arrays of equal length."""

    lo = np.atleast_1d(np.asarray(lower, dtype=float))
    hi = np.atleast_1d(np.asarray(upper, dtype=float))
    if size is not None:
        if lo.size == 1:
            lo = np.full(size, lo[0])
        if hi.size == 1:
            hi = np.full(size, hi[0])
    if lo.ndim != 1 or hi.ndim != 1 or lo.shape != hi.shape:
        raise InvalidDesign(f"bounds have mismatched shapes {lo.shape} and {hi.shape}")
    if size is not None and lo.size != size:
        raise InvalidDesign(f"bounds cover {lo.size} units, expected {size}")
    if not (np.all(np.isfinite(lo)) and np.all(np.isfinite(hi))):
        raise InvalidDesign("bounds must be finite")
    if np.any(lo > hi):
        raise InvalidDesign("lower bound exceeds upper bound")
    return lo, hi


def as_design(
    values: Iterable[float],
    lower: Bounds = 0.0,
    upper: Bounds = 1.0,
) -> Design:
    """Validate ``values`` against the bounds and return them as a Design."""

    arr = np.asarray(list(values), dtype=float)
    if arr.ndim != 1 or arr.size < 2:
        raise InvalidDesign("a design needs at least two units")
    if not np.all(np.isfinite(arr)):
        raise InvalidDesign("design values must be finite")
    lo, hi = resolve_bounds(lower, upper, arr.size)
    if np.any(arr < lo) or np.any(arr > hi):
        raise InvalidDesign("design values fall outside their bounds")
    return tuple(float(v) for v in arr)


def clip_design(values: Iterable[float], lower: Bounds, upper: Bounds) -> Design:
    """Clip raw optimiser output into the box and return it as a Design."""

    arr = np.asarray(list(values), dtype=float)
    lo, hi = resolve_bounds(lower, upper, arr.size)
    return as_design(np.clip(arr, lo, hi), lo, hi)


def canonical(design: Sequence[float], decimals: Optional[int] = None) -> Design:
    """Sorted (and optionally rounded) form of a design.

    Units are exchangeable in a regression design, so two designs that differ
    only by a permutation are the same design.
    """

    values = np.sort(np.asarray(design, dtype=float))
    if decimals is not None:
        # Adding 0.0 turns -0.0 into 0.0 so rounded keys compare and print alike.
        values = np.round(values, decimals) + 0.0
    return tuple(float(v) for v in values)


def endpoint_split(
    design: Sequence[float],
    lower: float = 0.0,
    upper: float = 1.0,
    atol: float = 1e-6,
) -> Tuple[int, int, int]:
    """Count units at the lower bound, at the upper bound and strictly inside."""

    arr = np.asarray(design, dtype=float)
    at_lower = int(np.sum(np.isclose(arr, lower, atol=atol)))
    at_upper = int(np.sum(np.isclose(arr, upper, atol=atol)))
    return at_lower, at_upper, int(arr.size) - at_lower - at_upper


def two_point_design(n_lower: int, n_upper: int, lower: float = 0.0, upper: float = 1.0) -> Design:
    """Design with ``n_lower`` units at ``lower`` followed by ``n_upper`` at ``upper``."""

    if n_lower < 0 or n_upper < 0:
        raise InvalidDesign("unit counts must be non-negative")
    return as_design([lower] * n_lower + [upper] * n_upper, lower, upper)


def format_design(design: Sequence[float]) -> str:
    """Serialise a design for the run log using ``repr`` so floats round-trip."""

    return DESIGN_SEPARATOR.join(repr(float(v)) for v in design)


def parse_design(text: str, lower: Bounds = 0.0, upper: Bounds = 1.0) -> Design:
    """Inverse of :func:`format_design`."""

    parts = [p.strip() for p in text.split(DESIGN_SEPARATOR) if p.strip()]
    try:
        values = [float(p) for p in parts]
    except ValueError as exc:
        raise InvalidDesign(f"cannot parse design {text!r}") from exc
    return as_design(values, lower, upper)
