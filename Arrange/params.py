import math
import os
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from Arrange.constants import MIN_CLEARANCE_DEFAULT, COLLISION_MAX_ATTEMPTS


class FixturePosition(BaseModel):
    x: float
    y: float
    z: float = 0.0
    wall: str = Field(pattern="^(north|south|east|west|top|bottom|left|right)$")


class FixtureDimensions(BaseModel):
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    depth: Optional[float] = Field(default=None, ge=0)


class FixtureProperties(BaseModel):
    swingDirection: Optional[str] = Field(default=None, pattern="^(inward|outward|sliding|none)$")
    clearanceRequired: Optional[float] = Field(default=None, ge=0)
    isLoadBearing: Optional[bool] = None
    providesNaturalLight: Optional[bool] = None


class Fixture(BaseModel):
    id: str
    type: str = Field(pattern="^(window|door|closet-door|french-door|fireplace)$")
    position: FixturePosition
    dimensions: FixtureDimensions
    properties: Optional[FixtureProperties] = None

    @property
    def clearance(self) -> float:
        if self.properties and self.properties.clearanceRequired:
            return self.properties.clearanceRequired
        return 0.0


class RoomDimensions(BaseModel):
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    height: float = Field(default=8.0, gt=0)


class Room(BaseModel):
    id: str = "default-bedroom"
    type: str = Field(default="bedroom", pattern="^(bedroom|living-room|dining-room|kitchen|office|bathroom)$")
    dimensions: RoomDimensions
    fixtures: List[Fixture] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    style: Optional[str] = None

    @property
    def width(self) -> float:
        return self.dimensions.width

    @property
    def length(self) -> float:
        return self.dimensions.length

    @property
    def area(self) -> float:
        return self.dimensions.width * self.dimensions.length


class FurnitureItem(BaseModel):
    """Catalog entry; immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = ""
    category: str = Field(default="", validation_alias=AliasChoices("category", "category_id"))
    # (Length, Width, Height): Length is head-to-foot, Width side-to-side
    dimensions: Tuple[float, float, float]
    price: float = Field(default=0.0, ge=0)
    style_tags: List[str] = Field(default_factory=list)

    @field_validator("dimensions")
    @classmethod
    def _non_negative(cls, value: Tuple[float, float, float]) -> Tuple[float, float, float]:
        if any(v < 0 for v in value):
            raise ValueError("Furniture dimensions must be non-negative")
        return value

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def length(self) -> float:
        return self.dimensions[0]

    @property
    def width(self) -> float:
        return self.dimensions[1]


class RawPlacement(BaseModel):
    """A best-effort placement as handed over by a layout proposer."""

    furnitureId: str = Field(min_length=1)
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    rotation: int = 0
    reasoning: str = ""
    isSymmetrical: Optional[bool] = None
    symmetryPartner: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_position(cls, data: Any) -> Any:
        # Proposers also emit {"position": {"x", "y", "z", "rotation"}}
        if isinstance(data, dict) and isinstance(data.get("position"), dict):
            flat = {k: v for k, v in data.items() if k != "position"}
            for key in ("x", "y", "rotation"):
                if key in data["position"] and key not in flat:
                    flat[key] = data["position"][key]
            return flat
        return data

    @field_validator("rotation", mode="before")
    @classmethod
    def _snap_rotation(cls, value: Any) -> int:
        if value is None:
            return 0
        value = float(value)
        if not math.isfinite(value):
            raise ValueError("rotation must be a finite number of degrees")
        return int(round(value / 90.0)) * 90 % 360


class FinalPlacement(BaseModel):
    """Render-ready placement returned to consumers."""

    model_config = ConfigDict(frozen=True)

    furnitureId: str
    x: float
    y: float
    z: float = 0.0
    rotation: int = 0
    layerOrder: int = Field(default=0, ge=0)
    placementText: str = ""
    isSymmetrical: bool = False
    symmetryPartner: Optional[str] = None


class UtilizationAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    totalFurnitureArea: float
    roomArea: float
    utilizationPercentage: float
    isOptimal: bool


class ArrangementProposal(BaseModel):
    """What a layout proposer (or the fallback planner) hands to post-processing."""

    strategy: str = ""
    reasoning: str = ""
    placements: List[RawPlacement] = Field(default_factory=list)
    skippedFurniture: List[Dict[str, str]] = Field(default_factory=list)
    spaceUtilizationAnalysis: Optional[UtilizationAnalysis] = None


class LayoutResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    placements: List[FinalPlacement]
    spaceUtilization: float
    outOfBounds: List[str] = Field(default_factory=list)
    diagnostics: List[Dict[str, Any]] = Field(default_factory=list)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class ArrangeConfig(BaseModel):
    # Reference behavior leaves a nightstand pair next to a bed where the
    # proposer put it; switch on to apply the flush-wall targets.
    enforce_nightstand_symmetry: bool = False
    # Reference behavior only reports the bed's preferred position.
    correct_bed_placement: bool = False
    min_clearance: float = Field(default=MIN_CLEARANCE_DEFAULT, ge=0)
    max_attempts: int = Field(default=COLLISION_MAX_ATTEMPTS, ge=0)

    @classmethod
    def from_env(cls) -> "ArrangeConfig":
        return cls(
            enforce_nightstand_symmetry=_env_flag("ARRANGE_ENFORCE_NIGHTSTAND_SYMMETRY", False),
            correct_bed_placement=_env_flag("ARRANGE_CORRECT_BED_PLACEMENT", False),
            min_clearance=float(os.environ.get("ARRANGE_MIN_CLEARANCE", MIN_CLEARANCE_DEFAULT)),
        )
