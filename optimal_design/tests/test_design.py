from __future__ import annotations

import numpy as np
import pytest

from optimal_design.design import (
    InvalidDesign,
    as_design,
    canonical,
    clip_design,
    endpoint_split,
    format_design,
    parse_design,
    resolve_bounds,
    two_point_design,
)


def test_design_survives_serialisation():
    rng = np.random.default_rng(3)
    design = as_design(rng.uniform(0.0, 1.0, size=20))

    text = format_design(design)
    parsed = parse_design(text)

    assert len(parsed) == len(design)
    assert np.allclose(parsed, design, rtol=0.0, atol=1e-15)
    # Bounds themselves are kept exactly.
    assert parse_design(format_design((0.0, 1.0))) == (0.0, 1.0)


def test_parse_design_rejects_garbage():
    with pytest.raises(InvalidDesign):
        parse_design("0.1;abc")
    with pytest.raises(InvalidDesign):
        parse_design("0.1;1.5")


@pytest.mark.parametrize(
    "values",
    [[0.5], [0.0, 1.01], [-0.1, 0.5], [0.2, float("inf")], [[0.1, 0.2], [0.3, 0.4]]],
)
def test_as_design_rejects_invalid_values(values):
    with pytest.raises(InvalidDesign):
        as_design(values)


def test_as_design_accepts_closed_interval():
    assert as_design([0, 1, 0.25]) == (0.0, 1.0, 0.25)


def test_as_design_is_immutable_tuple():
    design = as_design(np.array([0.2, 0.8]))
    assert isinstance(design, tuple)
    assert all(isinstance(v, float) for v in design)


def test_resolve_bounds_broadcasts_scalars_and_checks_order():
    lo, hi = resolve_bounds(0.0, [1.0, 2.0, 3.0], size=3)
    assert lo.tolist() == [0.0, 0.0, 0.0]
    assert hi.tolist() == [1.0, 2.0, 3.0]

    with pytest.raises(InvalidDesign):
        resolve_bounds([1.0, 1.0], [0.0, 2.0])
    with pytest.raises(InvalidDesign):
        resolve_bounds([0.0, 0.0], [1.0, 1.0, 1.0])


def test_clip_design_pulls_values_into_box():
    assert clip_design([-1e-12, 0.5, 1.0000001], 0.0, 1.0) == (0.0, 0.5, 1.0)


def test_canonical_sorts_and_rounds():
    design = (0.9999, 0.0001, 0.5)
    assert canonical(design) == (0.0001, 0.5, 0.9999)
    assert canonical(design, decimals=2) == (0.0, 0.5, 1.0)
    # Rounded negative zero compares and prints as zero.
    assert str(canonical((-0.001, 1.0), decimals=2)[0]) == "0.0"


def test_endpoint_split_and_two_point_design():
    design = two_point_design(12, 8)
    assert len(design) == 20
    assert endpoint_split(design) == (12, 8, 0)
    assert endpoint_split((0.0, 0.4, 1.0, 0.9999999)) == (1, 2, 1)

    with pytest.raises(InvalidDesign):
        two_point_design(-1, 3)
