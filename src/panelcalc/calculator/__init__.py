"""Cabinet panel calculator: standard parts, default templates and cut lists."""

from panelcalc.calculator.catalog import STANDARD_PARTS, PartFormulas, default_template, part_panel
from panelcalc.calculator.cutlist import (
    CutList,
    PanelCut,
    SheetEstimate,
    build_cut_list,
    resolve_thickness,
    sheets_needed,
)

__all__ = [
    "CutList",
    "PanelCut",
    "PartFormulas",
    "STANDARD_PARTS",
    "SheetEstimate",
    "build_cut_list",
    "default_template",
    "part_panel",
    "resolve_thickness",
    "sheets_needed",
]
