"""
Cut list: panel sizes, areas and sheet estimates for one cabinet.

Built on top of a template recompute. Every panel reports its computed
attributes; a panel with a failing formula keeps its errors and is left out
of the area total, so one broken formula never blanks the whole list.
"""

from __future__ import annotations

import logging
import math

from pydantic import BaseModel, ConfigDict, Field

from panelcalc.core.formula_lang.registry import FormulaRegistry
from panelcalc.core.ir.bindings import BindingSet
from panelcalc.core.ir.diagnostics import EvaluationError, is_error
from panelcalc.core.ir.templates import PanelSpec, Template, formula_name
from panelcalc.core.ir.values import Number
from panelcalc.core.settings import CutListSettings, SheetSize

logger = logging.getLogger(__name__)

_MM2_PER_M2 = 1_000_000


class PanelCut(BaseModel):
    """One line of the cut list."""

    name: str
    quantity: int
    thickness: float | None = None
    dimensions: dict[str, float] = Field(default_factory=dict)
    errors: dict[str, EvaluationError] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def width(self) -> float | None:
        return self.dimensions.get("width")

    @property
    def height(self) -> float | None:
        return self.dimensions.get("height")

    @property
    def area_m2(self) -> float | None:
        """Total board area for all pieces, or None if it cannot be computed."""
        if not self.ok or self.width is None or self.height is None:
            return None
        return self.width * self.height * self.quantity / _MM2_PER_M2


class SheetEstimate(BaseModel):
    """How many stock sheets of one size the cut list needs."""

    sheet: str
    count: int

    model_config = ConfigDict(frozen=True)


class CutList(BaseModel):
    """Computed panels plus totals for one cabinet."""

    template: str
    panels: list[PanelCut]
    total_area_m2: float
    sheets: list[SheetEstimate]

    model_config = ConfigDict(frozen=True)

    @property
    def failed_panels(self) -> list[PanelCut]:
        return [panel for panel in self.panels if not panel.ok]


def build_cut_list(
    template: Template,
    bindings: BindingSet,
    settings: CutListSettings | None = None,
    registry: FormulaRegistry | None = None,
) -> CutList:
    """Compute the cut list for ``template`` under ``bindings``.

    Args:
        template: Panels to compute.
        bindings: Cabinet parameter snapshot.
        settings: Sheet sizes and waste factor. Defaults to built-in values.
        registry: Optional registry holding cached formulas for this template.
            It is synced with the template before use.
    """
    settings = settings or CutListSettings()
    if registry is None:
        registry = FormulaRegistry.from_template(template)
    else:
        registry.sync(template)

    results = registry.recompute(bindings)
    panels = [_panel_cut(panel, results, bindings) for panel in template.panels]

    total = sum(area for panel in panels if (area := panel.area_m2) is not None)
    sheets = [
        SheetEstimate(sheet=sheet.name, count=sheets_needed(total, sheet, settings.waste_factor))
        for sheet in settings.sheets
    ]
    logger.info(
        "Cut list for %s: %d panels, %.3f m2, %d failed",
        template.name,
        len(panels),
        total,
        sum(1 for panel in panels if not panel.ok),
    )
    return CutList(template=template.name, panels=panels, total_area_m2=total, sheets=sheets)


def sheets_needed(area_m2: float, sheet: SheetSize, waste_factor: float) -> int:
    """Sheets required to cover ``area_m2`` with ``waste_factor`` extra."""
    return math.ceil(area_m2 / sheet.area_m2 * (1 + waste_factor))


def _panel_cut(
    panel: PanelSpec,
    results: dict[str, float | EvaluationError],
    bindings: BindingSet,
) -> PanelCut:
    dimensions: dict[str, float] = {}
    errors: dict[str, EvaluationError] = {}
    for attribute in panel.formulas:
        outcome = results[formula_name(panel.name, attribute)]
        if is_error(outcome):
            errors[attribute] = outcome
        else:
            dimensions[attribute] = outcome
    return PanelCut(
        name=panel.name,
        quantity=panel.quantity,
        thickness=resolve_thickness(panel, bindings),
        dimensions=dimensions,
        errors=errors,
    )


def resolve_thickness(panel: PanelSpec, bindings: BindingSet) -> float | None:
    """First bound thickness parameter, else the panel's fixed thickness."""
    for param in panel.thickness_params:
        value = bindings.get(param)
        if isinstance(value, Number):
            return value.value
    return panel.thickness
