import os
from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

LatLngPair = tuple[float, float]


def _expand(v: str) -> str:
    return os.path.expandvars(os.path.expanduser(v))


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1
    record: Literal["jsonl", "memory", "none"] = "jsonl"


# ----------------- ROAD NETWORK ---------------------


class SegmentModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = ""
    points: list[LatLngPair]

    @field_validator("points")
    @classmethod
    def _finite(cls, v: list[LatLngPair]) -> list[LatLngPair]:
        if any(not (isfinite(lat) and isfinite(lng)) for lat, lng in v):
            raise ValueError("segment points must be finite")
        return v


class NetworkInlineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["inline"] = "inline"
    segments: list[SegmentModel] = Field(default_factory=list)
    key_precision: int = Field(default=7, ge=1, le=12)


class NetworkByPathModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["json", "geojson"] = "json"
    key_precision: int = Field(default=7, ge=1, le=12)

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return _expand(v)


NetworkUnion = Annotated[NetworkInlineModel | NetworkByPathModel, Field(discriminator="by")]


# ----------------- PANORAMAS ---------------------


class PanoramaModel(BaseModel):
    """Remote table plus local overrides; files are merged under inline entries."""

    model_config = ConfigDict(extra="forbid")
    remote: dict[str, str] = Field(default_factory=dict)
    local: dict[str, str] = Field(default_factory=dict)
    remote_file: str | None = None
    local_file: str | None = None

    @field_validator("remote_file", "local_file")
    @classmethod
    def _expand(cls, v: str | None) -> str | None:
        return None if v is None else _expand(v)


# ----------------- NAVIGATION ---------------------


class RecomputeEveryFixModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["every_fix"] = "every_fix"


class RecomputeMinMovementModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["min_movement"] = "min_movement"
    min_move_m: float = 5.0

    @field_validator("min_move_m")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


RecomputeUnion = Annotated[
    RecomputeEveryFixModel | RecomputeMinMovementModel, Field(discriminator="kind")
]


class NavigationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    walking_speed_m_per_min: float = Field(default=80.0, gt=0)
    waypoint_radius_m: float = Field(default=70.0, ge=0)
    waypoint_policy: Literal["nearest", "last"] = "nearest"
    snap: Literal["vertex", "edge"] = "vertex"
    recompute: RecomputeUnion = Field(default_factory=RecomputeEveryFixModel)
    viewport_padding_px: tuple[int, int] = (50, 50)
    zoom: int = Field(default=18, ge=0, le=22)


class DestinationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    name: str = ""
    lat: float
    lng: float
    related_event_id: str | None = None
    related_staff_id: str | None = None


# ----------------- LOCATION PROVIDERS ---------------------


class FixModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    t: float
    lat: float
    lng: float
    accuracy_m: float | None = None


class LocationReplayModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["replay"] = "replay"
    fixes: list[FixModel] = Field(default_factory=list)
    file: str | None = None  # JSON lines of {t, lat, lng[, accuracy_m]}
    lost_after: int | None = Field(default=None, ge=1)  # permission revoked after N fixes

    @model_validator(mode="after")
    def _one_source(self):
        if self.fixes and self.file:
            raise ValueError("give either fixes or file, not both")
        if self.file:
            self.file = _expand(self.file)
        return self


class LocationSimulatedWalkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["simulated_walk"] = "simulated_walk"
    origin: LatLngPair
    t0: float = 0.0
    step_s: float = Field(default=5.0, gt=0)
    noise_m: float = Field(default=0.0, ge=0)
    seed: int = 0


class LocationUnavailableModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["unavailable"] = "unavailable"
    reason: str = "no_provider"


LocationUnion = Annotated[
    LocationReplayModel | LocationSimulatedWalkModel | LocationUnavailableModel,
    Field(discriminator="kind"),
]

# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    log: LogModel = LogModel()
    network: NetworkUnion
    panoramas: PanoramaModel = PanoramaModel()
    navigation: NavigationModel = NavigationModel()
    destination: DestinationModel | None = None
    location: LocationUnion = Field(default_factory=LocationUnavailableModel)
