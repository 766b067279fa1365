"""
Public entry points of the formula engine.

The template editor calls ``parse_formula`` when a panel formula is saved;
the cabinet calculator calls ``evaluate_template`` on every change to a
cabinet's dimensions or construction flags. Neither raises for a bad
formula: problems come back as structured error values next to the
results of the formulas that did work.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from panelcalc.core.formula_lang.compiler import parse_formula
from panelcalc.core.formula_lang.registry import FormulaRegistry, RecomputeResult, recompute
from panelcalc.core.ir.bindings import BindingSet
from panelcalc.core.ir.diagnostics import is_error
from panelcalc.core.ir.templates import Formula, Template

logger = logging.getLogger(__name__)

__all__ = ["evaluate_template", "parse_formula"]


def evaluate_template(
    template: Template | FormulaRegistry | Iterable[Formula],
    bindings: BindingSet,
) -> RecomputeResult:
    """Evaluate every formula of a template against one binding set.

    Pass a FormulaRegistry to reuse parsed formulas across calls; a Template
    is parsed afresh each time.

    Returns:
        Qualified formula name -> number or error value, in template order.
    """
    if not isinstance(bindings, BindingSet):
        raise TypeError(f"bindings must be a BindingSet, got {type(bindings).__name__}")

    results = recompute(template, bindings)
    failures = [name for name, outcome in results.items() if is_error(outcome)]
    if failures:
        logger.info(
            "Template evaluated with %d of %d formulas failing: %s",
            len(failures),
            len(results),
            ", ".join(failures),
        )
    return results
