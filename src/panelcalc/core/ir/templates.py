"""
Formulas, panels and cabinet templates.

A template is an ordered list of panels. Each panel carries one formula per
attribute (normally ``width`` and ``height``), and each formula gets a
qualified name ``"<panel>.<attribute>"`` such as ``"Side Panel.width"``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from panelcalc.core.ir.formulas import Expr


class Formula(BaseModel):
    """A parsed formula bound to the panel attribute it computes."""

    name: str = Field(description="Qualified attribute name, e.g. 'Top Panel.width'")
    source: str = Field(description="Original formula text, kept for display and editing")
    expression: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name} = {self.source}"


def formula_name(panel: str, attribute: str) -> str:
    return f"{panel}.{attribute}"


class PanelSpec(BaseModel):
    """
    One panel of a cabinet template.

    Thickness is read from the first bound parameter in ``thickness_params``,
    falling back to the fixed ``thickness``. For example a double back uses
    ``["doubleBack", "back"]`` and a drawer side uses ``["drawer"]`` with a
    15 mm fallback.
    """

    name: str
    formulas: dict[str, str] = Field(description="Attribute name -> formula source, in order")
    quantity: int = Field(default=1, ge=0)
    thickness_params: list[str] = Field(default_factory=list)
    thickness: float | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def _no_dots(cls, v: str) -> str:
        if "." in v:
            raise ValueError("panel names may not contain '.'")
        if not v.strip():
            raise ValueError("panel name is required")
        return v

    def qualified_formulas(self) -> list[tuple[str, str]]:
        return [(formula_name(self.name, attr), src) for attr, src in self.formulas.items()]


class Template(BaseModel):
    """An ordered set of panels describing one cabinet design."""

    name: str
    panels: list[PanelSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("panels")
    @classmethod
    def _unique_panels(cls, v: list[PanelSpec]) -> list[PanelSpec]:
        seen: set[str] = set()
        for panel in v:
            if panel.name in seen:
                raise ValueError(f"Duplicate panel name: {panel.name}")
            seen.add(panel.name)
        return v

    def formula_sources(self) -> list[tuple[str, str]]:
        """All (qualified name, source) pairs in panel order."""
        return [pair for panel in self.panels for pair in panel.qualified_formulas()]

    def panel(self, name: str) -> PanelSpec | None:
        for panel in self.panels:
            if panel.name == name:
                return panel
        return None
