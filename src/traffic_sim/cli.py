# traffic_sim/cli.py
import argparse
import json
import sys

from pydantic import ValidationError

from traffic_sim.app.build import build
from traffic_sim.config.models import EngineModel
from traffic_sim.errors import TrafficSimError
from traffic_sim.io.config import load_config
from traffic_sim.io.export import dump_payload, traffic_point_records
from traffic_sim.io.geojson import load_network
from traffic_sim.sim.refresh import RefreshScheduler


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="traffic-sim",
        description=(
            "Annotate a GeoJSON road network with intersections, "
            "synthetic traffic and signal splits."
        ),
    )
    ap.add_argument("network", help="GeoJSON FeatureCollection of roads")
    ap.add_argument("--config", help="YAML engine config")
    ap.add_argument("--seed", type=int, default=None, help="override config seed")
    ap.add_argument("--output", "-o", help="write JSON here instead of stdout")
    ap.add_argument("--indent", type=int, default=None, help="JSON indent")
    ap.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="override log level",
    )
    ap.add_argument(
        "--refresh-until",
        type=float,
        default=None,
        help="run the refresh loop up to this time (s) and emit one JSON line per tick",
    )
    ap.add_argument(
        "--refresh-interval", type=float, default=None, help="override refresh interval (s)"
    )
    return ap


def _model(args) -> EngineModel:
    raw = (load_config(args.config) if args.config else EngineModel()).model_dump()
    if args.seed is not None:
        raw["seed"] = args.seed
    if args.log_level is not None:
        raw["log"]["level"] = args.log_level
    if args.refresh_interval is not None:
        raw["refresh"]["interval_s"] = args.refresh_interval
    # re-validate so overrides are checked too
    return EngineModel.model_validate(raw)


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    try:
        model = _model(args)
        network = load_network(args.network)
        engine = build(model)
        out = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
        try:
            if args.refresh_until is None:
                dump_payload(engine.run(network), out, indent=args.indent)
            else:

                def emit(t, index, batches):
                    rec = {"t": t, "index": index, "traffic_points": traffic_point_records(batches)}
                    out.write(json.dumps(rec) + "\n")

                RefreshScheduler(
                    engine.generate,
                    network,
                    emit,
                    interval_s=model.refresh.interval_s,
                    realtime=model.refresh.realtime,
                    hooks=engine.hooks,
                ).run(until=args.refresh_until)
        finally:
            if out is not sys.stdout:
                out.close()
    except (TrafficSimError, ValidationError, FileNotFoundError) as e:
        print(f"traffic-sim: error: {e}", file=sys.stderr)
        return 2
    return 0
