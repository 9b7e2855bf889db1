# traffic_sim/app/build.py
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from traffic_sim.app.protocols import CongestionPolicy, TrafficPointSampler
from traffic_sim.config.models import EngineModel, TierModel
from traffic_sim.domain.entities.geography import Point, RoadNetwork
from traffic_sim.domain.entities.traffic import CongestionResult, SignalSplit, TrafficBatch
from traffic_sim.domain.mechanics.mechanics_intersections import IntersectionDetector
from traffic_sim.domain.mechanics.mechanics_signals import SignalRatioCalculator
from traffic_sim.errors import GenerationError
from traffic_sim.io.engine_logging import EngineLogging
from traffic_sim.runtime.registries import make_congestion, make_sampler
from traffic_sim.sim.hooks import EngineHooks, NoopHooks
from traffic_sim.sim.rng import RNGRegistry


@dataclass(frozen=True)
class EngineResult:
    network: RoadNetwork
    intersections: list[Point]
    batches: dict[str, TrafficBatch]
    congestion: list[CongestionResult]  # aligned with network.roads
    signals: list[SignalSplit] = field(default_factory=list)  # aligned with intersections

    @property
    def traffic_points(self) -> list[Point]:
        return [p for b in self.batches.values() for p in b.coords]


@dataclass
class Engine:
    cfg: EngineModel
    rng: RNGRegistry
    hooks: EngineHooks
    detector: IntersectionDetector
    samplers: dict[str, tuple[TierModel, TrafficPointSampler]]
    congestion_policy: CongestionPolicy
    signal_calc: SignalRatioCalculator

    def generate(self, network: RoadNetwork, *, batch_index: int = 0) -> dict[str, TrafficBatch]:
        """One independent batch per tier; separation holds within a tier only."""
        vertices = network.vertices()
        out: dict[str, TrafficBatch] = {}
        for name, (tier, sampler) in self.samplers.items():
            rng = self.rng.substream("traffic", name, batch_index)
            try:
                batch = sampler.sample(
                    vertices,
                    tier=name,
                    count=tier.count,
                    min_separation_m=tier.min_separation_m,
                    rng=rng,
                )
            except GenerationError as e:
                self.hooks.generation_failed(exc=e, tier=name, batch_index=batch_index)
                raise
            self.hooks.batch(
                tier=name,
                count=len(batch),
                attempts=batch.attempts,
                min_separation_m=batch.min_separation_m,
            )
            out[name] = batch
        return out

    def classify(
        self, network: RoadNetwork, batches: Mapping[str, TrafficBatch]
    ) -> list[CongestionResult]:
        return [self.congestion_policy.classify(r.polyline.first, batches) for r in network.roads]

    def signal_splits(
        self, intersections: list[Point], batches: Mapping[str, TrafficBatch]
    ) -> list[SignalSplit]:
        pts = [p for b in batches.values() for p in b.coords]
        return [self.signal_calc.split(i, pts) for i in intersections]

    def run(self, network: RoadNetwork, *, batch_index: int = 0) -> EngineResult:
        """One full pass over the network.

        Traffic comes from batch `batch_index` of this engine's RNG, and the
        master seed is fixed when the engine is built, even with `seed: None`.
        Repeated calls with the same index therefore return the same traffic;
        pass a new index (as the refresh loop does) for a fresh draw.
        """
        t0 = time.perf_counter()
        self.hooks.run_start(
            features=len(network),
            roads=len(network.roads),
            vertices=sum(len(p) for p in network.polylines),
        )

        intersections, n_candidates = self.detector.detect(network)
        self.hooks.intersections(
            candidates=n_candidates,
            accepted=len(intersections),
            min_separation_m=self.detector.min_separation_m,
        )

        batches = self.generate(network, batch_index=batch_index)
        congestion = self.classify(network, batches)
        signals = self.signal_splits(intersections, batches) if self.cfg.signals.enabled else []

        self.hooks.run_end(
            intersections=len(intersections),
            batches={k: len(b) for k, b in batches.items()},
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return EngineResult(network, intersections, batches, congestion, signals)


def build(cfg: EngineModel | Mapping | None = None, *, use_logging: bool = True) -> Engine:
    # 0) Validate config
    if cfg is None:
        model = EngineModel()
    else:
        model = cfg if isinstance(cfg, EngineModel) else EngineModel.model_validate(cfg)

    # 1) RNG & hooks
    rng_registry = RNGRegistry(model.seed, scenario=model.name)
    hooks = (
        EngineLogging(run_id=model.name, level=model.log.level, debug=model.log.debug)
        if use_logging
        else NoopHooks()
    )

    # 2) Strategies
    samplers = {t.name: (t, make_sampler(t.sampler)) for t in model.tiers}
    congestion_policy = make_congestion(model.congestion)

    return Engine(
        cfg=model,
        rng=rng_registry,
        hooks=hooks,
        detector=IntersectionDetector(model.intersections.min_separation_m),
        samplers=samplers,
        congestion_policy=congestion_policy,
        signal_calc=SignalRatioCalculator(model.signals.axis_tolerance_deg, hooks=hooks),
    )
