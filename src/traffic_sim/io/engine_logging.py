# io/engine_logging.py
import json
import logging
import sys

from traffic_sim.sim.hooks import NoopHooks


def _default_json_logger(name="traffic_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    Structured logs for one engine: run lifecycle, detection and generation
    summaries, and (debug only) every signal split. `debug=True` lowers the
    default logger to DEBUG whatever `level` says.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug = run_id, debug
        self.log = logger or _default_json_logger(level="DEBUG" if debug else level)

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # run lifecycle

    def run_start(self, *, features: int, roads: int, vertices: int):
        self._emit("INFO", "run_start", features=features, roads=roads, vertices=vertices)

    def run_end(self, *, intersections: int, batches: dict[str, int], wall_ms: float):
        self._emit(
            "INFO",
            "run_end",
            intersections=intersections,
            batches=batches,
            wall_ms=round(wall_ms, 3),
        )

    # components

    def intersections(self, *, candidates: int, accepted: int, min_separation_m: float):
        self._emit(
            "INFO",
            "intersections",
            candidates=candidates,
            accepted=accepted,
            min_separation_m=min_separation_m,
        )

    def batch(self, *, tier: str, count: int, attempts: int, min_separation_m: float):
        self._emit(
            "INFO",
            "batch",
            tier=tier,
            count=count,
            attempts=attempts,
            min_separation_m=min_separation_m,
        )

    def generation_failed(self, *, exc: BaseException, **extra):
        self._emit("ERROR", "generation_failed", error=str(exc), **extra)

    def signal_split(self, *, intersection, vertical_count: int, horizontal_count: int, split):
        if self.debug:
            self._emit(
                "DEBUG",
                "signal_split",
                lon=intersection.lon,
                lat=intersection.lat,
                vertical_count=vertical_count,
                horizontal_count=horizontal_count,
                vertical=split.vertical,
                horizontal=split.horizontal,
            )

    # refresh loop

    def tick(self, *, t: float, index: int, batches: dict[str, int]):
        self._emit("INFO", "tick", t=t, index=index, batches=batches)
