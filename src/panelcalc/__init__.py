"""
panelcalc - Parametric panel formulas for cabinet templates.

Parses the small arithmetic/conditional formulas used in cabinet templates
(``width - (2 * side)``, ``depth - (hasBack ? back : 0)``) and evaluates them
against a cabinet's dimensions, material thicknesses and construction flags.
"""

from __future__ import annotations

from importlib import metadata as _metadata

# Re-export commonly used types for convenience
from .core import ir
from .core.engine import evaluate_template, parse_formula
from .core.errors import FormulaError, FormulaEvaluationError, FormulaSyntaxError
from .core.formula_lang import FormulaRegistry
from .core.ir import BindingSet, Cabinet, Formula, PanelSpec, Template


def _get_version() -> str:
    """Installed distribution version, or a local marker for source checkouts."""
    try:
        return _metadata.version("panelcalc")
    except _metadata.PackageNotFoundError:
        return "0+unknown"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "BindingSet",
    "Cabinet",
    "Formula",
    "FormulaError",
    "FormulaEvaluationError",
    "FormulaRegistry",
    "FormulaSyntaxError",
    "PanelSpec",
    "Template",
    "evaluate_template",
    "parse_formula",
]
