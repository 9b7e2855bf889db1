from collections.abc import Iterable

from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.traffic import SignalSplit
from traffic_sim.sim.hooks import EngineHooks, NoopHooks

MIN_RATIO = 10.0
MAX_RATIO = 90.0


def axis_counts(intersection: Point, points: Iterable[Point], tol_deg: float) -> tuple[int, int]:
    """(vertical, horizontal) counts; one point may count toward both axes."""
    v = h = 0
    for p in points:
        if abs(p.lon - intersection.lon) < tol_deg:
            v += 1
        if abs(p.lat - intersection.lat) < tol_deg:
            h += 1
    return v, h


def split_from_counts(v: int, h: int) -> SignalSplit:
    total = v + h
    if total == 0 or v == h:
        return SignalSplit(50.0, 50.0)
    vertical = min(v / total * 100, MAX_RATIO)
    vertical = max(MIN_RATIO, min(MAX_RATIO, vertical))
    return SignalSplit(vertical, 100 - vertical)


class SignalRatioCalculator:
    def __init__(self, axis_tolerance_deg: float = 0.0005, hooks: EngineHooks | None = None):
        self.tol = axis_tolerance_deg
        self.hooks = hooks or NoopHooks()

    def split(self, intersection: Point, points: Iterable[Point]) -> SignalSplit:
        v, h = axis_counts(intersection, points, self.tol)
        s = split_from_counts(v, h)
        self.hooks.signal_split(
            intersection=intersection, vertical_count=v, horizontal_count=h, split=s
        )
        return s
