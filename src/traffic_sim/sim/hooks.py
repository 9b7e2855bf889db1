# sim/hooks.py
from typing import Protocol


class EngineHooks(Protocol):
    def run_start(self, *, features, roads, vertices): ...
    def run_end(self, *, intersections, batches, wall_ms): ...
    def intersections(self, *, candidates, accepted, min_separation_m): ...
    def batch(self, *, tier, count, attempts, min_separation_m): ...
    def generation_failed(self, *, exc: BaseException, **kw): ...
    def signal_split(self, *, intersection, vertical_count, horizontal_count, split): ...
    def tick(self, *, t, index, batches): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def intersections(self, **_):
        pass

    def batch(self, **_):
        pass

    def generation_failed(self, **_):
        pass

    def signal_split(self, **_):
        pass

    def tick(self, **_):
        pass
