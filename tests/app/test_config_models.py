# tests/app/test_config_models.py
import pytest
from pydantic import ValidationError

from traffic_sim.config.models import (
    AnchoredJitterSamplerModel,
    ContinuousCongestionModel,
    EngineModel,
    RandomVertexSamplerModel,
    TierModel,
)


def test_defaults_match_the_reference_setup():
    cfg = EngineModel()
    assert cfg.seed is None
    assert cfg.intersections.min_separation_m == 50.0
    assert [(t.name, t.count, t.min_separation_m) for t in cfg.tiers] == [
        ("heavy", 2, 300.0),
        ("moderate", 2, 150.0),
    ]
    assert all(isinstance(t.sampler, RandomVertexSamplerModel) for t in cfg.tiers)
    assert isinstance(cfg.congestion, ContinuousCongestionModel)
    assert cfg.congestion.reference_m == 300.0
    assert cfg.signals.axis_tolerance_deg == 0.0005


def test_sampler_kind_discriminates():
    tier = TierModel.model_validate(
        {"name": "x", "count": 1, "min_separation_m": 10, "sampler": {"kind": "anchored_jitter"}}
    )
    assert isinstance(tier.sampler, AnchoredJitterSamplerModel)
    assert tier.sampler.anchors == "endpoints" and tier.sampler.radius_m == 100.0


@pytest.mark.parametrize(
    "raw",
    [
        {"tiers": [{"name": "a", "count": 1, "min_separation_m": 1}, {"name": "a", "count": 1, "min_separation_m": 1}]},
        {"tiers": [{"name": " ", "count": 1, "min_separation_m": 1}]},
        {"tiers": [{"name": "a", "count": -1, "min_separation_m": 1}]},
        {"tiers": [{"name": "a", "count": 1, "min_separation_m": -5}]},
        {"tiers": [{"name": "a", "count": 1, "min_separation_m": 1, "sampler": {"kind": "teleport"}}]},
        {"tiers": [{"name": "a", "count": 1, "min_separation_m": 1, "sampler": {"kind": "random_vertex", "max_attempts": 0}}]},
        {"congestion": {"kind": "continuous", "reference_m": 0}},
        {"congestion": {"kind": "tiered", "heavy_tier": "jam"}},
        {"intersections": {"min_separation_m": -1}},
        {"signals": {"axis_tolerance_deg": 0}},
        {"refresh": {"interval_s": 0}},
        {"unexpected": True},
    ],
)
def test_invalid_configs_are_rejected(raw):
    with pytest.raises(ValidationError):
        EngineModel.model_validate(raw)


def test_tiered_policy_accepts_existing_tier_names():
    cfg = EngineModel.model_validate(
        {
            "tiers": [
                {"name": "jam", "count": 1, "min_separation_m": 100},
                {"name": "slow", "count": 1, "min_separation_m": 100},
            ],
            "congestion": {"kind": "tiered", "heavy_tier": "jam", "moderate_tier": "slow"},
        }
    )
    assert cfg.congestion.heavy_tier == "jam"
