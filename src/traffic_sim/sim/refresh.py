# sim/refresh.py

import heapq
import time
from collections.abc import Callable
from dataclasses import dataclass

from traffic_sim.domain.entities.geography import RoadNetwork
from traffic_sim.domain.entities.traffic import TrafficBatch

Batches = dict[str, TrafficBatch]
Generate = Callable[..., Batches]  # engine.generate(network, batch_index=...)
Consumer = Callable[[float, int, Batches], None]


@dataclass(frozen=True, order=True)
class Tick:
    t: float
    index: int


class RefreshScheduler:
    """
    Re-run traffic generation every `interval_s` and hand each new set of
    batches to `consumer`. Ticks run one at a time and each tick's batches
    are built fresh, so a consumer never sees a half-built refresh.

    Time is simulated unless `realtime` is set, in which case the loop sleeps
    until each tick is due.
    """

    def __init__(
        self,
        generate: Generate,
        network: RoadNetwork,
        consumer: Consumer,
        *,
        interval_s: float,
        realtime: bool = False,
        hooks=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.generate, self.network, self.consumer = generate, network, consumer
        self.interval_s, self.realtime, self._sleep = interval_s, realtime, sleep
        self._hooks = hooks
        self._t = 0.0
        self._q: list[Tick] = []

    @property
    def now(self) -> float:
        return self._t

    def schedule(self, tick: Tick) -> None:
        if tick.t + 1e-12 < self._t:
            raise RuntimeError(f"tick scheduled in the past: {tick.t} < now {self._t}")
        heapq.heappush(self._q, tick)

    def run(self, until: float, *, start: float = 0.0, max_ticks: int | None = None) -> int:
        """Run ticks at start, start + interval, ... while t <= until. Returns ticks run."""
        if not self._q:
            self.schedule(Tick(start, 0))
        wall0 = time.monotonic()
        processed = 0
        while self._q and self._q[0].t <= until:
            tick = heapq.heappop(self._q)
            if self.realtime:
                delay = (tick.t - start) - (time.monotonic() - wall0)
                if delay > 0:
                    self._sleep(delay)
            self._t = tick.t
            batches = self.generate(self.network, batch_index=tick.index)
            if self._hooks is not None:
                sizes = {k: len(b) for k, b in batches.items()}
                self._hooks.tick(t=tick.t, index=tick.index, batches=sizes)
            self.consumer(tick.t, tick.index, batches)
            processed += 1
            self.schedule(Tick(tick.t + self.interval_s, tick.index + 1))
            if max_ticks and processed >= max_ticks:
                break
        return processed
