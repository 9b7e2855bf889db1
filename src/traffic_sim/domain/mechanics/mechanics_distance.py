import math

import numpy as np

from traffic_sim.domain.entities.geography import Point

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE = 111_300.0  # flat approximation used for jitter radii


def haversine_m(a: Point, b: Point) -> float:
    """Great-circle distance in meters. NaN coordinates yield NaN."""
    rad = math.pi / 180
    dlat = (b.lat - a.lat) * rad
    dlon = (b.lon - a.lon) * rad
    h = (
        math.sin(dlat / 2) * math.sin(dlat / 2)
        + math.cos(a.lat * rad) * math.cos(b.lat * rad) * math.sin(dlon / 2) * math.sin(dlon / 2)
    )
    h = min(max(h, 0.0), 1.0)  # rounding; NaN passes through
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_many(p: Point, lons: np.ndarray, lats: np.ndarray) -> np.ndarray:
    """Distances from p to each (lons[i], lats[i]); same formula as haversine_m."""
    rad = np.pi / 180
    lons = np.asarray(lons, dtype=float)
    lats = np.asarray(lats, dtype=float)
    dlat = (lats - p.lat) * rad
    dlon = (lons - p.lon) * rad
    h = np.sin(dlat / 2) ** 2 + np.cos(p.lat * rad) * np.cos(lats * rad) * np.sin(dlon / 2) ** 2
    h = np.clip(h, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def too_close(p: Point, accepted: list[Point], min_m: float) -> bool:
    # NaN distances compare False, so they never block acceptance
    return any(haversine_m(q, p) < min_m for q in accepted)


def nearest_m(p: Point, others: list[Point]) -> float:
    """Smallest distance from p to others; +inf when there is nothing to compare."""
    if not others:
        return math.inf
    d = haversine_many(p, [q.lon for q in others], [q.lat for q in others])
    d = d[~np.isnan(d)]
    return float(d.min()) if d.size else math.inf
