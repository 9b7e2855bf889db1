# runtime/registries.py
from collections.abc import Callable

from traffic_sim.app.protocols import CongestionPolicy, TrafficPointSampler
from traffic_sim.config.models import (
    AnchoredJitterSamplerModel,
    CongestionUnion,
    ContinuousCongestionModel,
    RandomVertexSamplerModel,
    SamplerUnion,
    TieredCongestionModel,
)
from traffic_sim.domain.mechanics.mechanics_congestion import ContinuousCongestion, TieredCongestion
from traffic_sim.domain.mechanics.mechanics_traffic_samplers import (
    AnchoredJitterSampler,
    RandomVertexSampler,
)

SamplerFactory = Callable[[SamplerUnion], TrafficPointSampler]
CongestionFactory = Callable[[CongestionUnion], CongestionPolicy]

_sampler_registry: dict[str, SamplerFactory] = {}
_congestion_registry: dict[str, CongestionFactory] = {}


# ------------------- Traffic samplers ---------------------------


def register_sampler(kind: str):
    def deco(fn: SamplerFactory):
        _sampler_registry[kind] = fn
        return fn

    return deco


def make_sampler(cfg: SamplerUnion) -> TrafficPointSampler:
    try:
        factory = _sampler_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown sampler kind {cfg.kind!r}") from None
    return factory(cfg)


@register_sampler("random_vertex")
def _make_random_vertex(cfg: RandomVertexSamplerModel):
    return RandomVertexSampler(max_attempts=cfg.max_attempts)


@register_sampler("anchored_jitter")
def _make_anchored_jitter(cfg: AnchoredJitterSamplerModel):
    return AnchoredJitterSampler(
        radius_m=cfg.radius_m, anchors=cfg.anchors, max_attempts=cfg.max_attempts
    )


# ------------------- Congestion policies ---------------------------


def register_congestion(kind: str):
    def deco(fn: CongestionFactory):
        _congestion_registry[kind] = fn
        return fn

    return deco


def make_congestion(cfg: CongestionUnion) -> CongestionPolicy:
    try:
        factory = _congestion_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown congestion kind {cfg.kind!r}") from None
    return factory(cfg)


@register_congestion("continuous")
def _make_continuous(cfg: ContinuousCongestionModel):
    return ContinuousCongestion(reference_m=cfg.reference_m)


@register_congestion("tiered")
def _make_tiered(cfg: TieredCongestionModel):
    return TieredCongestion(
        reference_m=cfg.reference_m,
        heavy_tier=cfg.heavy_tier,
        moderate_tier=cfg.moderate_tier,
    )
