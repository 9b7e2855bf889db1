from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Real
from typing import Any

from traffic_sim.errors import NetworkInputError


def _number(x: Any, where: str) -> float:
    # bool is an int subclass but never a coordinate
    if isinstance(x, bool) or not isinstance(x, Real):
        raise NetworkInputError(f"{where}: non-numeric coordinate {x!r}")
    return float(x)


# Core geometry types; coordinates are WGS84 degrees
@dataclass(frozen=True)
class Point:
    lon: float
    lat: float

    def as_list(self) -> list[float]:
        return [self.lon, self.lat]


@dataclass(frozen=True)
class Polyline:
    coords: tuple[Point, ...]

    def __post_init__(self):
        if not self.coords:
            raise NetworkInputError("a polyline needs at least one vertex")

    @classmethod
    def from_coords(cls, coords: Any, where: str = "line") -> "Polyline":
        """Validate raw `[lon, lat, ...]` pairs; altitude, if present, is dropped."""
        if not isinstance(coords, Sequence) or isinstance(coords, str) or not coords:
            raise NetworkInputError(f"{where}: LineString needs a non-empty coordinate list")
        pts = []
        for j, c in enumerate(coords):
            at = f"{where}, vertex {j}"
            if not isinstance(c, Sequence) or isinstance(c, str) or len(c) < 2:
                raise NetworkInputError(f"{at}: expected [lon, lat], got {c!r}")
            pts.append(Point(_number(c[0], at), _number(c[1], at)))
        return cls(tuple(pts))

    @property
    def first(self) -> Point:
        return self.coords[0]

    def __len__(self) -> int:
        return len(self.coords)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.coords)


@dataclass(frozen=True)
class RoadFeature:
    """One input feature. Only line features carry a polyline."""

    index: int
    kind: str  # geometry type, e.g. "LineString"
    raw: Mapping[str, Any] = field(repr=False, compare=False)
    polyline: Polyline | None = None

    @property
    def is_road(self) -> bool:
        return self.polyline is not None


class RoadNetwork:
    """Read-only snapshot of the input features.

    Roads are the line features, in input order. Coordinate iteration walks
    roads in order and each road's vertices in order; duplicates are kept.
    """

    def __init__(self, features: list[RoadFeature] | tuple[RoadFeature, ...]):
        self.features: tuple[RoadFeature, ...] = tuple(features)
        self.roads: tuple[RoadFeature, ...] = tuple(f for f in self.features if f.is_road)

    def __len__(self) -> int:
        return len(self.features)

    @property
    def polylines(self) -> list[Polyline]:
        return [f.polyline for f in self.roads]

    def iter_coords(self) -> Iterator[Point]:
        for road in self.roads:
            yield from road.polyline

    def vertices(self) -> list[Point]:
        return list(self.iter_coords())

    @classmethod
    def from_polylines(cls, lines: list[list[tuple[float, float]]]) -> "RoadNetwork":
        """Build a network straight from coordinate lists (no GeoJSON round trip).

        Lines go through the same checks as GeoJSON input, so a bad line raises
        NetworkInputError naming its index.
        """
        feats = []
        for i, line in enumerate(lines):
            poly = Polyline.from_coords(line, f"line {i}")
            coords = [p.as_list() for p in poly]
            raw = {"type": "Feature", "geometry": {"type": "LineString", "coordinates": coords}}
            feats.append(RoadFeature(index=i, kind="LineString", raw=raw, polyline=poly))
        return cls(feats)
