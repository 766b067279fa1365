"""
Cabinet description used to build binding sets.

The calculator UI collects three dimensions, a set of material thicknesses
and a handful of construction checkboxes. ``Cabinet.bindings()`` flattens
them into the canonical parameter names the formulas use.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from panelcalc.core.ir.bindings import BindingSet


class CabinetType(StrEnum):
    """Cabinet families from the template catalog."""

    BASE = "base"
    WALL = "wall"
    TALL = "tall"
    DRAWER = "drawer"
    CORNER = "corner"
    SPECIALTY = "specialty"


class Dimensions(BaseModel):
    """Outside dimensions in millimetres."""

    width: float = Field(ge=0, allow_inf_nan=False)
    height: float = Field(ge=0, allow_inf_nan=False)
    depth: float = Field(ge=0, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)


class DimensionLimits(BaseModel):
    """Allowed range for each outside dimension."""

    minimum: Dimensions
    maximum: Dimensions

    model_config = ConfigDict(frozen=True)


class MaterialThickness(BaseModel):
    """Board thickness per component, in millimetres."""

    side: float = 18
    top_bottom: float = 18
    back: float = 12
    shelf: float = 18
    door: float = 18
    drawer: float | None = None
    fixed_panel: float | None = None
    drawer_bottom: float | None = None
    uprights: float | None = None
    double_back: float | None = None

    model_config = ConfigDict(frozen=True)


class Construction(BaseModel):
    """Construction checkboxes. Top, bottom and back are on unless switched off."""

    has_top: bool = True
    has_bottom: bool = True
    has_back: bool = True
    is_corner: bool = False
    has_double_back: bool = False
    has_toe: bool = False
    has_fixed_shelf: bool = False
    has_front_panel: bool = False
    has_filler_panel: bool = False
    has_uprights: bool = False

    model_config = ConfigDict(frozen=True)


_THICKNESS_PARAMS = {
    "side": "side",
    "top_bottom": "topBottom",
    "back": "back",
    "shelf": "shelf",
    "door": "door",
    "drawer": "drawer",
    "fixed_panel": "fixedPanel",
    "drawer_bottom": "drawerBottom",
    "uprights": "uprights",
    "double_back": "doubleBack",
}

_FLAG_PARAMS = {
    "has_top": "hasTop",
    "has_bottom": "hasBottom",
    "has_back": "hasBack",
    "is_corner": "isCorner",
    "has_double_back": "hasDoubleBack",
    "has_toe": "hasToe",
    "has_fixed_shelf": "hasFixedShelf",
    "has_front_panel": "hasFrontPanel",
    "has_filler_panel": "hasFillerPanel",
    "has_uprights": "hasUprights",
}


class Cabinet(BaseModel):
    """One configured cabinet instance."""

    name: str
    cabinet_type: CabinetType = CabinetType.BASE
    dimensions: Dimensions
    thickness: MaterialThickness = Field(default_factory=MaterialThickness)
    construction: Construction = Field(default_factory=Construction)
    door_count: int = Field(default=1, ge=0)
    drawer_count: int = Field(default=3, ge=0)
    shelves: int = Field(default=1, ge=0)
    limits: DimensionLimits | None = None

    model_config = ConfigDict(frozen=True)

    def bindings(self) -> BindingSet:
        """Snapshot of this cabinet's parameters for formula evaluation."""
        params: dict[str, float | bool] = {
            "width": self.dimensions.width,
            "height": self.dimensions.height,
            "depth": self.dimensions.depth,
            "doorCount": self.door_count,
            "drawerCount": self.drawer_count,
        }
        for field_name, param in _THICKNESS_PARAMS.items():
            value = getattr(self.thickness, field_name)
            if value is not None:
                params[param] = value
        for field_name, param in _FLAG_PARAMS.items():
            params[param] = getattr(self.construction, field_name)
        return BindingSet(params=params)

    def resize(self, **dimensions: float) -> Cabinet:
        """Return a copy with some outside dimensions changed."""
        merged = {**self.dimensions.model_dump(), **dimensions}
        return self.model_copy(update={"dimensions": Dimensions(**merged)})

    def check_dimensions(self) -> list[str]:
        """Describe every dimension outside ``limits``. Empty when in range."""
        if self.limits is None:
            return []
        problems: list[str] = []
        for axis in ("width", "height", "depth"):
            value = getattr(self.dimensions, axis)
            low = getattr(self.limits.minimum, axis)
            high = getattr(self.limits.maximum, axis)
            if value < low:
                problems.append(f"{axis} {value:g}mm is below the minimum of {low:g}mm")
            elif value > high:
                problems.append(f"{axis} {value:g}mm is above the maximum of {high:g}mm")
        return problems
