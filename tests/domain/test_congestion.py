# tests/domain/test_congestion.py
import math

import pytest

from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.traffic import TrafficBatch, TrafficPoint
from traffic_sim.domain.mechanics.mechanics_congestion import (
    ContinuousCongestion,
    TieredCongestion,
    ramp_color,
)
from traffic_sim.domain.mechanics.mechanics_distance import EARTH_RADIUS_M

ROAD = Point(0.0, 0.0)


def _north(m: float) -> Point:
    """Point m meters due north of ROAD."""
    return Point(0.0, m / (EARTH_RADIUS_M * math.pi / 180))


def _batch(tier: str, *points: Point) -> TrafficBatch:
    return TrafficBatch(tier=tier, min_separation_m=0.0, points=tuple(TrafficPoint(p, tier) for p in points))


def test_ramp_endpoints_and_midpoint():
    assert ramp_color(0) == (0, 255, 0)
    assert ramp_color(100) == (255, 0, 0)
    assert ramp_color(50) == (127, 127, 0)


# ---------- Tiered threshold


def test_tiered_heavy_wins_over_moderate():
    batches = {"heavy": _batch("heavy", _north(100)), "moderate": _batch("moderate", _north(400))}
    res = TieredCongestion(reference_m=300.0).classify(ROAD, batches)
    assert res.intensity == 100
    assert res.color == (255, 0, 0)


def test_tiered_moderate_gives_amber():
    batches = {"heavy": _batch("heavy", _north(1000)), "moderate": _batch("moderate", _north(200))}
    res = TieredCongestion(reference_m=300.0).classify(ROAD, batches)
    assert res.intensity == 50
    assert res.color == (127, 127, 0)


def test_tiered_nothing_nearby_is_green():
    batches = {"heavy": _batch("heavy", _north(1000)), "moderate": _batch("moderate", _north(900))}
    res = TieredCongestion(reference_m=300.0).classify(ROAD, batches)
    assert res.intensity == 0 and res.color == (0, 255, 0)


def test_tiered_missing_tiers_are_treated_as_empty():
    assert TieredCongestion().classify(ROAD, {}).intensity == 0
    res = TieredCongestion(heavy_tier="jam", moderate_tier="slow").classify(
        ROAD, {"slow": _batch("slow", _north(10))}
    )
    assert res.intensity == 50


def test_tiered_is_a_step_not_a_falloff():
    near = TieredCongestion().classify(ROAD, {"heavy": _batch("heavy", _north(10))})
    far = TieredCongestion().classify(ROAD, {"heavy": _batch("heavy", _north(290))})
    assert near == far


# ---------- Continuous falloff


def test_continuous_linear_falloff():
    res = ContinuousCongestion(reference_m=300.0).classify(ROAD, {"heavy": _batch("heavy", _north(150))})
    assert res.intensity == pytest.approx(50.0, abs=1e-6)
    assert res.color == (127, 127, 0)


def test_continuous_uses_nearest_of_any_tier():
    batches = {"heavy": _batch("heavy", _north(290)), "moderate": _batch("moderate", _north(30))}
    res = ContinuousCongestion(reference_m=300.0).classify(ROAD, batches)
    assert res.intensity == pytest.approx(90.0, abs=1e-6)


def test_continuous_bounds():
    policy = ContinuousCongestion(reference_m=300.0)
    assert policy.classify(ROAD, {"t": _batch("t", ROAD)}).intensity == 100
    assert policy.classify(ROAD, {"t": _batch("t", _north(600))}).intensity == 0
    no_points = policy.classify(ROAD, {})
    assert no_points.intensity == 0 and no_points.color == (0, 255, 0)


def test_continuous_ignores_nan_sources():
    batches = {"t": _batch("t", Point(float("nan"), float("nan")), _north(0))}
    assert ContinuousCongestion().classify(ROAD, batches).intensity == 100


def test_policies_disagree_on_same_geometry():
    batches = {"heavy": _batch("heavy", _north(150)), "moderate": _batch("moderate")}
    assert ContinuousCongestion().classify(ROAD, batches).intensity == pytest.approx(50.0, abs=1e-6)
    assert TieredCongestion().classify(ROAD, batches).intensity == 100
