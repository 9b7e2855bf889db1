from dataclasses import dataclass

from traffic_sim.domain.entities.geography import Point


@dataclass(frozen=True)
class TrafficPoint:
    point: Point
    tier: str


@dataclass(frozen=True)
class TrafficBatch:
    """Points of one tier from one generation call."""

    tier: str
    min_separation_m: float
    points: tuple[TrafficPoint, ...]
    attempts: int = 0

    def __len__(self) -> int:
        return len(self.points)

    @property
    def coords(self) -> list[Point]:
        return [tp.point for tp in self.points]


@dataclass(frozen=True)
class CongestionResult:
    intensity: float  # 0..100
    color: tuple[int, int, int]


@dataclass(frozen=True)
class SignalSplit:
    vertical: float
    horizontal: float
