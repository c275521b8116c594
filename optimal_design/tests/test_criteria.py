from __future__ import annotations

import itertools

import numpy as np
import pytest

from optimal_design.criteria import (
    AOptimality,
    DOptimality,
    SingularMatrix,
    get_criterion,
    information_matrix,
)
from optimal_design.design import two_point_design

UNITS = 20


def all_two_point_splits(units: int = UNITS):
    for n_upper in range(1, units):
        yield two_point_design(units - n_upper, n_upper)


def spread_designs(units: int = UNITS):
    rng = np.random.default_rng(7)
    yield tuple(np.linspace(0.0, 1.0, units))
    yield tuple(np.clip(0.5 + rng.normal(scale=0.05, size=units), 0.0, 1.0))
    for _ in range(20):
        yield tuple(rng.uniform(0.0, 1.0, size=units))
    # Endpoints plus interior points.
    yield tuple([0.0] * 9 + [0.5] * 2 + [1.0] * 9)


def test_information_matrix_entries():
    design = (0.0, 0.5, 1.0)
    M = information_matrix(design)
    assert M.shape == (2, 2)
    assert M[0, 0] == pytest.approx(3.0)
    assert M[0, 1] == pytest.approx(1.5)
    assert M[1, 0] == pytest.approx(1.5)
    assert M[1, 1] == pytest.approx(1.25)


def test_d_optimal_even_split_beats_every_tested_design():
    """Half the units at each end minimises det(inv(X'X))."""
    evaluator = DOptimality()
    best = two_point_design(10, 10)
    best_score = evaluator.score(best)

    assert best_score == pytest.approx(0.01)
    for design in itertools.chain(all_two_point_splits(), spread_designs()):
        assert best_score <= evaluator.score(design) + 1e-12


def test_a_optimal_twelve_eight_split_beats_spread_designs():
    evaluator = AOptimality()
    twelve_eight = two_point_design(12, 8)
    score = evaluator.score(twelve_eight)

    # (20 + 8) / (8 * 12)
    assert score == pytest.approx(28 / 96)
    for design in spread_designs():
        assert score < evaluator.score(design)
    # Best among all two-point splits, including the even split.
    for design in all_two_point_splits():
        assert score <= evaluator.score(design) + 1e-12
    assert score < evaluator.score(two_point_design(10, 10))


def test_a_optimality_is_not_mirror_symmetric():
    """The intercept breaks the x -> 1 - x symmetry, unlike D-optimality."""
    a = AOptimality()
    d = DOptimality()
    twelve_low = two_point_design(12, 8)
    twelve_high = two_point_design(8, 12)

    assert a.score(twelve_low) < a.score(twelve_high)
    assert d.score(twelve_low) == pytest.approx(d.score(twelve_high))
    # The mirrored split is still far better than a spread design.
    assert a.score(twelve_high) < a.score(tuple(np.linspace(0.0, 1.0, UNITS)))


@pytest.mark.parametrize("evaluator", [AOptimality(), DOptimality()])
@pytest.mark.parametrize("level", [0.0, 0.3, 0.5, 1.0])
def test_constant_design_is_singular(evaluator, level):
    with pytest.raises(SingularMatrix):
        evaluator.score((level,) * UNITS)


def test_singular_matrix_is_a_linalg_error():
    with pytest.raises(np.linalg.LinAlgError):
        AOptimality()((0.5, 0.5))


@pytest.mark.parametrize("bad", [(0.5,), (), (0.0, float("nan")), ((0.0, 1.0), (1.0, 0.0))])
def test_malformed_design_is_rejected(bad):
    with pytest.raises(ValueError):
        AOptimality().score(bad)


@pytest.mark.parametrize(
    "name, expected",
    [("A", AOptimality), ("a-optimality", AOptimality), (" D ", DOptimality), ("d_optimality", DOptimality)],
)
def test_get_criterion_resolves_names(name, expected):
    evaluator = get_criterion(name)
    assert isinstance(evaluator, expected)


def test_get_criterion_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unknown optimality criterion"):
        get_criterion("E")
