import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False  # per-offer rejection logs


class QueueModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_requests: int = Field(default=1000, ge=1)


class PathModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_path_length: int | None = Field(default=100, ge=1)  # None => unbounded


# ----------------- MATCHING POLICIES ---------------------


class MatchingPolicySubPathModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["subpath_first_fit"] = "subpath_first_fit"


class MatchingPolicyExactEndpointsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["exact_endpoints"] = "exact_endpoints"


MatchingPolicyUnion = Annotated[
    MatchingPolicySubPathModel | MatchingPolicyExactEndpointsModel,
    Field(discriminator="kind"),
]

# ----------------- WORLD SOURCES ---------------------


class RoadsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    file: str
    must_exist: bool = True

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class DemandModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    drivers: int = Field(default=3, ge=1)
    passengers: int = Field(default=5, ge=1)
    offers: int = Field(default=3, ge=0)
    requests: int = Field(default=5, ge=0)
    horizon: int = Field(default=100, ge=1)
    max_capacity: int = Field(default=3, ge=1)


class SyntheticModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    places: int = Field(default=10, ge=2)
    edge_prob: float = Field(default=0.3, gt=0.0, le=1.0)
    min_cost: int = Field(default=1, ge=0)
    max_cost: int = 10
    demand: DemandModel | None = None  # random users, offers and requests

    @model_validator(mode="after")
    def _check_costs(self):
        if self.max_cost < self.min_cost:
            raise ValueError(f"max_cost ({self.max_cost}) must be >= min_cost ({self.min_cost})")
        return self


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    seed: int = 0
    log: LogModel = LogModel()
    queue: QueueModel = QueueModel()
    paths: PathModel = PathModel()
    matching: MatchingPolicyUnion = Field(default_factory=MatchingPolicySubPathModel)
    roads: RoadsModel | None = None
    synthetic: SyntheticModel | None = None
