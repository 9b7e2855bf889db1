# io/export.py
import copy
import json
from typing import Any, TextIO

from traffic_sim.app.build import EngineResult
from traffic_sim.domain.entities.traffic import TrafficBatch


def annotated_features(result: EngineResult) -> list[dict[str, Any]]:
    """Input features in input order; roads get `color` and `congestion` properties.

    Geometry is left untouched; properties are copied, never mutated in place.
    """
    by_index = {road.index: c for road, c in zip(result.network.roads, result.congestion)}
    out = []
    for feat in result.network.features:
        f = copy.deepcopy(dict(feat.raw))
        c = by_index.get(feat.index)
        if c is not None:
            props = dict(f.get("properties") or {})
            props["color"] = list(c.color)
            props["congestion"] = c.intensity
            f["properties"] = props
        out.append(f)
    return out


def traffic_point_records(batches: dict[str, TrafficBatch]) -> list[dict[str, Any]]:
    return [
        {"tier": tp.tier, "coordinates": tp.point.as_list()}
        for batch in batches.values()
        for tp in batch.points
    ]


def to_payload(result: EngineResult) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": annotated_features(result),
        "intersections": [p.as_list() for p in result.intersections],
        "traffic_points": traffic_point_records(result.batches),
        "signals": [
            {"coordinates": p.as_list(), "vertical": s.vertical, "horizontal": s.horizontal}
            for p, s in zip(result.intersections, result.signals)
        ],
        "summary": {
            "total_roads": len(result.network.roads),
            "total_intersections": len(result.intersections),
        },
    }


def dump_payload(result: EngineResult, fp: TextIO, *, indent: int | None = None) -> None:
    json.dump(to_payload(result), fp, indent=indent)
    fp.write("\n")
