# main.py
import sys

from traffic_sim.app.build import build
from traffic_sim.cli import main
from traffic_sim.io.geojson import load_network


def run(network_path: str, seed: int | None = None):
    engine = build({"seed": seed})
    network = load_network(network_path)

    # One pass: intersections, one batch per tier, colors, signal splits
    return engine.run(network)


if __name__ == "__main__":
    sys.exit(main())
