# tests/io/test_config_loading.py
import pytest
from pydantic import ValidationError

from traffic_sim.config.models import AnchoredJitterSamplerModel, TieredCongestionModel
from traffic_sim.errors import ConfigError, TrafficSimError
from traffic_sim.io.config import load_config

YAML = """
name: toronto
seed: 42
intersections:
  min_separation_m: 40
tiers:
  - name: heavy
    count: 3
    min_separation_m: 300
    sampler: {kind: anchored_jitter, radius_m: 80, anchors: random}
  - name: moderate
    count: 2
    min_separation_m: 150
congestion:
  kind: tiered
  reference_m: 250
"""


def test_yaml_config_round_trip(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text(YAML, encoding="utf-8")
    cfg = load_config(path)
    assert cfg.name == "toronto" and cfg.seed == 42
    assert cfg.intersections.min_separation_m == 40
    assert isinstance(cfg.tiers[0].sampler, AnchoredJitterSamplerModel)
    assert cfg.tiers[0].sampler.radius_m == 80
    assert cfg.tiers[1].sampler.kind == "random_vertex"
    assert isinstance(cfg.congestion, TieredCongestionModel)


def test_empty_yaml_means_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert [t.name for t in cfg.tiers] == ["heavy", "moderate"]


def test_invalid_yaml_config_is_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("tiers:\n  - {name: heavy, count: -1, min_separation_m: 10}\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_unparsable_yaml_names_the_file(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("tiers: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="broken.yaml") as ei:
        load_config(path)
    assert isinstance(ei.value, TrafficSimError)
