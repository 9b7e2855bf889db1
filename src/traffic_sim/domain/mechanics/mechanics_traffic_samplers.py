import math
from collections.abc import Callable

import numpy as np

from traffic_sim.app.protocols import TrafficPointSampler
from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.traffic import TrafficBatch, TrafficPoint
from traffic_sim.domain.mechanics.mechanics_distance import METERS_PER_DEGREE, too_close
from traffic_sim.errors import GenerationError


def jitter_point(anchor: Point, radius_m: float, rng: np.random.Generator) -> Point:
    """Uniform-by-area draw from the disk of radius_m around anchor.

    sqrt(u) on the radius keeps area density flat; a plain u would pile
    points up near the anchor.
    """
    u, v = rng.random(2)
    w = (radius_m / METERS_PER_DEGREE) * math.sqrt(u)
    t = 2 * math.pi * v
    return Point(anchor.lon + w * math.cos(t), anchor.lat + w * math.sin(t))


def _place(
    draw: Callable[[int], Point],
    *,
    tier: str,
    count: int,
    min_separation_m: float,
    vertices: int,
    max_attempts: int,
) -> TrafficBatch:
    # draw(k) proposes a point for slot k; accepted list is local to this call
    accepted: list[Point] = []
    attempts = 0
    while len(accepted) < count:
        if attempts >= max_attempts or vertices == 0:
            raise GenerationError(
                tier=tier,
                count=count,
                min_separation_m=min_separation_m,
                vertices=vertices,
                attempts=attempts,
                accepted=len(accepted),
            )
        attempts += 1
        p = draw(len(accepted))
        if not too_close(p, accepted, min_separation_m):
            accepted.append(p)
    return TrafficBatch(
        tier=tier,
        min_separation_m=min_separation_m,
        points=tuple(TrafficPoint(p, tier) for p in accepted),
        attempts=attempts,
    )


class RandomVertexSampler(TrafficPointSampler):
    """Draw network vertices uniformly (duplicates weigh more)."""

    def __init__(self, max_attempts: int = 10_000):
        self.max_attempts = max_attempts

    def sample(
        self,
        vertices: list[Point],
        *,
        tier: str,
        count: int,
        min_separation_m: float,
        rng: np.random.Generator,
    ) -> TrafficBatch:
        def draw(_slot: int) -> Point:
            return vertices[int(rng.integers(0, len(vertices)))]

        return _place(
            draw,
            tier=tier,
            count=count,
            min_separation_m=min_separation_m,
            vertices=len(vertices),
            max_attempts=self.max_attempts,
        )


class AnchoredJitterSampler(TrafficPointSampler):
    """Jitter around anchor vertices.

    anchors="endpoints" cycles over the first and last vertex of the
    flattened network; anchors="random" picks a fresh vertex per draw.
    """

    def __init__(
        self, radius_m: float = 100.0, anchors: str = "endpoints", max_attempts: int = 10_000
    ):
        if anchors not in ("endpoints", "random"):
            raise ValueError(f"Unknown anchor policy {anchors!r}")
        self.radius_m, self.anchors, self.max_attempts = radius_m, anchors, max_attempts

    def _anchor(self, vertices: list[Point], slot: int, rng: np.random.Generator) -> Point:
        if self.anchors == "endpoints":
            ends = (vertices[0], vertices[-1])
            return ends[slot % 2]
        return vertices[int(rng.integers(0, len(vertices)))]

    def sample(
        self,
        vertices: list[Point],
        *,
        tier: str,
        count: int,
        min_separation_m: float,
        rng: np.random.Generator,
    ) -> TrafficBatch:
        def draw(slot: int) -> Point:
            return jitter_point(self._anchor(vertices, slot, rng), self.radius_m, rng)

        return _place(
            draw,
            tier=tier,
            count=count,
            min_separation_m=min_separation_m,
            vertices=len(vertices),
            max_attempts=self.max_attempts,
        )
