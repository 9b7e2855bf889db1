# io/geojson.py
import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from traffic_sim.domain.entities.geography import Polyline, RoadFeature, RoadNetwork
from traffic_sim.errors import NetworkInputError

LINE_KINDS = {"LineString"}


def parse_feature(i: int, feat: Any) -> RoadFeature:
    where = f"feature {i}"
    if not isinstance(feat, Mapping):
        raise NetworkInputError(f"{where}: expected an object, got {type(feat).__name__}")
    geom = feat.get("geometry")
    if not isinstance(geom, Mapping):
        # null geometry is legal GeoJSON; such a feature is simply not a road
        return RoadFeature(index=i, kind="None", raw=feat)
    kind = str(geom.get("type"))
    poly = Polyline.from_coords(geom.get("coordinates"), where) if kind in LINE_KINDS else None
    return RoadFeature(index=i, kind=kind, raw=feat, polyline=poly)


def parse_network(data: Mapping[str, Any] | Sequence[Any]) -> RoadNetwork:
    """Build a RoadNetwork from a FeatureCollection mapping or a bare feature list."""
    if isinstance(data, Mapping):
        features = data.get("features")
    else:
        features = data
    if not isinstance(features, Sequence) or isinstance(features, str):
        raise NetworkInputError("input has no feature list")
    if not features:
        raise NetworkInputError("feature set is empty")

    network = RoadNetwork([parse_feature(i, f) for i, f in enumerate(features)])
    if not network.roads:
        kinds = sorted({f.kind for f in network.features})
        raise NetworkInputError(
            f"no LineString features among {len(network)} features (kinds: {kinds})"
        )
    return network


def load_network(source: str | Path | Mapping[str, Any] | Sequence[Any]) -> RoadNetwork:
    """Accept a path to a GeoJSON file or already-decoded GeoJSON."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(path)
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise NetworkInputError(f"{path}: not valid JSON ({e})") from e
        return parse_network(data)
    return parse_network(source)

