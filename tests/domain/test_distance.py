# tests/domain/test_distance.py
import math

import numpy as np
import pytest

from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.mechanics.mechanics_distance import (
    EARTH_RADIUS_M,
    haversine_m,
    haversine_many,
    nearest_m,
    too_close,
)

DEG_M = EARTH_RADIUS_M * math.pi / 180  # one degree of arc


def test_distance_to_self_is_zero():
    for p in [Point(0.0, 0.0), Point(-79.34, 43.67), Point(179.9, -89.0)]:
        assert haversine_m(p, p) == 0.0


def test_distance_is_symmetric():
    a, b = Point(-79.3400, 43.6700), Point(-79.3385, 43.6712)
    assert haversine_m(a, b) == haversine_m(b, a)


def test_one_degree_of_latitude():
    assert haversine_m(Point(0.0, 0.0), Point(0.0, 1.0)) == pytest.approx(DEG_M, rel=1e-9)


def test_small_offset_is_about_33_meters():
    d = haversine_m(Point(0.0, 0.0), Point(0.0, 0.0003))
    assert 33.0 < d < 34.0


def test_antipodes_do_not_raise():
    d = haversine_m(Point(0.0, 0.0), Point(180.0, 0.0))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)


def test_nan_propagates():
    assert math.isnan(haversine_m(Point(float("nan"), 0.0), Point(0.0, 0.0)))
    assert math.isnan(haversine_m(Point(0.0, 0.0), Point(0.0, float("nan"))))


def test_vectorised_matches_scalar():
    p = Point(-79.34, 43.67)
    others = [Point(-79.341, 43.671), Point(-79.30, 43.60), Point(-79.34, 43.67)]
    d = haversine_many(p, np.array([q.lon for q in others]), np.array([q.lat for q in others]))
    expected = [haversine_m(p, q) for q in others]
    assert np.allclose(d, expected, rtol=1e-9, atol=1e-6)


def test_nan_distance_never_counts_as_too_close():
    nan_pt = Point(float("nan"), float("nan"))
    assert not too_close(Point(0.0, 0.0), [nan_pt], 50.0)
    assert too_close(Point(0.0, 0.0), [nan_pt, Point(0.0, 0.0001)], 50.0)


def test_nearest_ignores_nan_and_handles_empty():
    p = Point(0.0, 0.0)
    assert nearest_m(p, []) == math.inf
    assert nearest_m(p, [Point(float("nan"), 0.0)]) == math.inf
    assert nearest_m(p, [Point(float("nan"), 0.0), Point(0.0, 0.0)]) == 0.0
