from collections.abc import Iterable

from traffic_sim.domain.entities.geography import Point, RoadNetwork
from traffic_sim.domain.mechanics.mechanics_distance import too_close


def detect_candidates(network: RoadNetwork) -> list[Point]:
    """Every repeat occurrence of an exact coordinate, in discovery order.

    Matching is exact float equality; vertices that are merely close are not
    candidates. A vertex shared by n roads yields n - 1 candidates.
    """
    seen: set[tuple[float, float]] = set()
    out: list[Point] = []
    for p in network.iter_coords():
        key = (p.lon, p.lat)
        if key in seen:
            out.append(p)
        else:
            seen.add(key)
    return out


def cluster(candidates: Iterable[Point], min_separation_m: float) -> list[Point]:
    """Greedy first-wins filter: keep a candidate only if it is at least
    min_separation_m from everything kept so far. Kept points never move."""
    kept: list[Point] = []
    for p in candidates:
        if not too_close(p, kept, min_separation_m):
            kept.append(p)
    return kept


def find_intersections(network: RoadNetwork, min_separation_m: float = 50.0) -> list[Point]:
    return cluster(detect_candidates(network), min_separation_m)


class IntersectionDetector:
    def __init__(self, min_separation_m: float = 50.0):
        self.min_separation_m = min_separation_m

    def detect(self, network: RoadNetwork) -> tuple[list[Point], int]:
        """Return (intersections, candidate_count)."""
        candidates = detect_candidates(network)
        return cluster(candidates, self.min_separation_m), len(candidates)
