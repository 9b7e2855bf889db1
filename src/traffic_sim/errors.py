# traffic_sim/errors.py


class TrafficSimError(Exception):
    """Base class for errors raised by the engine."""


class NetworkInputError(TrafficSimError, ValueError):
    """The road network could not be parsed into line geometries."""


class GenerationError(TrafficSimError, RuntimeError):
    """A traffic batch could not be placed within its retry budget."""

    def __init__(
        self,
        *,
        tier: str,
        count: int,
        min_separation_m: float,
        vertices: int,
        attempts: int,
        accepted: int,
    ):
        self.tier = tier
        self.count = count
        self.min_separation_m = min_separation_m
        self.vertices = vertices
        self.attempts = attempts
        self.accepted = accepted
        super().__init__(
            f"tier {tier!r}: placed {accepted}/{count} points with min_separation_m="
            f"{min_separation_m} over {vertices} network vertices after {attempts} attempts; "
            "lower the count or the separation"
        )


class ConfigError(TrafficSimError, ValueError):
    """An engine config file could not be read as YAML."""
