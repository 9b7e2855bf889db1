from collections.abc import Mapping
from typing import Protocol, runtime_checkable

import numpy as np

from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.traffic import CongestionResult, TrafficBatch


# ------------- Generation --------------------
@runtime_checkable
class TrafficPointSampler(Protocol):
    """
    Responsibilities:
    • Place `count` synthetic traffic sources for one tier on the network.
    • Keep every pair in the batch at least `min_separation_m` apart.
    • Give up with GenerationError once the retry budget is spent.
    Units: degrees for coordinates, meters for distances.
    """

    def sample(
        self,
        vertices: list[Point],
        *,
        tier: str,
        count: int,
        min_separation_m: float,
        rng: np.random.Generator,
    ) -> TrafficBatch: ...


# ------------- Classification --------------------
@runtime_checkable
class CongestionPolicy(Protocol):
    """
    Map a road's representative coordinate to an intensity in [0, 100]
    and its display color, given every tier's batch.
    """

    def classify(self, coord: Point, batches: Mapping[str, TrafficBatch]) -> CongestionResult: ...
