"""Core panelcalc functionality: IR, formula language, engine entry points, settings."""

from . import ir
from .engine import evaluate_template, parse_formula
from .errors import (
    DivisionByZeroError,
    FormulaError,
    FormulaEvaluationError,
    FormulaSyntaxError,
    NumericOverflowError,
    TypeMismatchError,
    UndefinedVariableError,
)
from .formula_lang import FormulaRegistry, recompute
from .settings import CutListSettings, SheetSize, load_settings

__all__ = [
    "ir",
    "CutListSettings",
    "DivisionByZeroError",
    "FormulaError",
    "FormulaEvaluationError",
    "FormulaRegistry",
    "FormulaSyntaxError",
    "NumericOverflowError",
    "SheetSize",
    "TypeMismatchError",
    "UndefinedVariableError",
    "evaluate_template",
    "load_settings",
    "parse_formula",
    "recompute",
]
