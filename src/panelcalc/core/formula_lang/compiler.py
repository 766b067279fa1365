"""
Formula compilation and single-formula evaluation.

These functions sit on the boundary between the raising internals and the
template editor: malformed or failing formulas come back as structured
error values, never as exceptions.
"""

from __future__ import annotations

import logging

from panelcalc.core.errors import FormulaEvaluationError, FormulaSyntaxError
from panelcalc.core.formula_lang.evaluator import evaluate_number
from panelcalc.core.formula_lang.parser import parse_expr
from panelcalc.core.ir.bindings import BindingSet
from panelcalc.core.ir.diagnostics import EvaluationError, ParseError
from panelcalc.core.ir.templates import Formula

logger = logging.getLogger(__name__)


def parse_formula(source: str, name: str | None = None) -> Formula | ParseError:
    """Parse formula text into a ``Formula``.

    Called when a template panel's formula is saved or edited. Without a
    ``name`` the formula is named after its source text.

    Returns:
        The parsed Formula, or a ParseError describing where parsing stopped.
    """
    try:
        expression = parse_expr(source)
    except FormulaSyntaxError as e:
        logger.debug("Formula %r failed to parse: %s", name or source, e)
        return e.payload
    return Formula(name=source if name is None else name, source=source, expression=expression)


def evaluate_formula(formula: Formula, bindings: BindingSet) -> float | EvaluationError:
    """Evaluate one parsed formula to a panel dimension or an error value."""
    try:
        return evaluate_number(formula.expression, bindings)
    except FormulaEvaluationError as e:
        logger.debug("Formula %r failed: %s", formula.name or formula.source, e)
        return e.payload
