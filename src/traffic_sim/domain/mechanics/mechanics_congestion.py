import math
from collections.abc import Mapping

from traffic_sim.app.protocols import CongestionPolicy
from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.traffic import CongestionResult, TrafficBatch
from traffic_sim.domain.mechanics.mechanics_distance import nearest_m


def ramp_color(intensity: float) -> tuple[int, int, int]:
    """Linear green (0) to red (100)."""
    t = intensity / 100
    return (math.floor(255 * t), math.floor(255 * (1 - t)), 0)


def _result(intensity: float) -> CongestionResult:
    return CongestionResult(intensity=intensity, color=ramp_color(intensity))


class ContinuousCongestion(CongestionPolicy):
    """Falloff from the nearest source of any tier."""

    def __init__(self, reference_m: float = 300.0):
        self.reference_m = reference_m

    def classify(self, coord: Point, batches: Mapping[str, TrafficBatch]) -> CongestionResult:
        pts = [p for b in batches.values() for p in b.coords]
        d = nearest_m(coord, pts)
        return _result(max(0.0, 100 - (d / self.reference_m) * 100))


class TieredCongestion(CongestionPolicy):
    """Step function: heavy within reference -> 100, moderate -> 50, else 0."""

    def __init__(
        self,
        reference_m: float = 300.0,
        heavy_tier: str = "heavy",
        moderate_tier: str = "moderate",
    ):
        self.reference_m = reference_m
        self.heavy_tier, self.moderate_tier = heavy_tier, moderate_tier

    def _within(self, coord: Point, batch: TrafficBatch | None) -> bool:
        if batch is None:
            return False
        return nearest_m(coord, batch.coords) <= self.reference_m

    def classify(self, coord: Point, batches: Mapping[str, TrafficBatch]) -> CongestionResult:
        if self._within(coord, batches.get(self.heavy_tier)):
            return _result(100.0)
        if self._within(coord, batches.get(self.moderate_tier)):
            return _result(50.0)
        return _result(0.0)
