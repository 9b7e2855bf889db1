from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False  # emit per-intersection signal_split records


class IntersectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    min_separation_m: float = Field(default=50.0, ge=0)


# ----------------- TRAFFIC SAMPLERS ---------------------


class RandomVertexSamplerModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["random_vertex"] = "random_vertex"
    max_attempts: int = Field(default=10_000, ge=1)


class AnchoredJitterSamplerModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["anchored_jitter"] = "anchored_jitter"
    radius_m: float = Field(default=100.0, ge=0)
    anchors: Literal["endpoints", "random"] = "endpoints"
    max_attempts: int = Field(default=10_000, ge=1)


SamplerUnion = Annotated[
    RandomVertexSamplerModel | AnchoredJitterSamplerModel,
    Field(discriminator="kind"),
]


class TierModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    count: int = Field(ge=0)
    min_separation_m: float = Field(ge=0)
    sampler: SamplerUnion = Field(default_factory=RandomVertexSamplerModel)

    @field_validator("name")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("tier name must not be blank")
        return v


def _default_tiers() -> list[TierModel]:
    return [
        TierModel(name="heavy", count=2, min_separation_m=300.0),
        TierModel(name="moderate", count=2, min_separation_m=150.0),
    ]


# ----------------- CONGESTION POLICIES ---------------------


class ContinuousCongestionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["continuous"] = "continuous"
    reference_m: float = 300.0

    @field_validator("reference_m")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class TieredCongestionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["tiered"] = "tiered"
    reference_m: float = 300.0
    heavy_tier: str = "heavy"
    moderate_tier: str = "moderate"

    @field_validator("reference_m")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


CongestionUnion = Annotated[
    ContinuousCongestionModel | TieredCongestionModel,
    Field(discriminator="kind"),
]


# ------------------------------------------------------------------


class SignalModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    enabled: bool = True
    axis_tolerance_deg: float = Field(default=0.0005, gt=0)


class RefreshModel(BaseModel):
    """Periodic regeneration of traffic batches (external scheduler)."""

    model_config = ConfigDict(extra="forbid")
    interval_s: float = Field(default=5.0, gt=0)
    realtime: bool = False


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "default"
    seed: int | None = None  # None => fresh entropy each build
    log: LogModel = LogModel()
    intersections: IntersectionModel = IntersectionModel()
    tiers: list[TierModel] = Field(default_factory=_default_tiers)
    congestion: CongestionUnion = Field(default_factory=ContinuousCongestionModel)
    signals: SignalModel = SignalModel()
    refresh: RefreshModel = RefreshModel()

    @model_validator(mode="after")
    def _check_tiers(self):
        names = [t.name for t in self.tiers]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"tier names must be unique; duplicated: {dupes}")
        if isinstance(self.congestion, TieredCongestionModel):
            wanted = (self.congestion.heavy_tier, self.congestion.moderate_tier)
            missing = [n for n in wanted if n not in names]
            if missing:
                raise ValueError(f"tiered congestion refers to unknown tiers: {missing}")
        return self
