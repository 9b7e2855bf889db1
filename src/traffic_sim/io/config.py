# src/traffic_sim/io/config.py
import os
from pathlib import Path

import yaml

from traffic_sim.config.models import EngineModel
from traffic_sim.errors import ConfigError


def load_config(path: str | Path) -> EngineModel:
    """Read a YAML engine config; an empty file means all defaults."""
    path = Path(os.path.expandvars(os.path.expanduser(str(path))))
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: not valid YAML ({e})") from e
    return EngineModel.model_validate(raw)
