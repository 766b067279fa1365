"""
Panel formula language.

Tokenizer, parser, evaluator, static checker and recompute driver for the
cabinet panel formulas described in the template editor help.

Usage:
    from panelcalc.core.formula_lang import parse_expr, evaluate_number
    from panelcalc.core.ir import BindingSet

    expr = parse_expr("width - (2 * side)")
    result = evaluate_number(expr, BindingSet.of(width=600, side=18))
    # result == 564.0
"""

from panelcalc.core.formula_lang.compiler import evaluate_formula, parse_formula
from panelcalc.core.formula_lang.evaluator import evaluate, evaluate_number
from panelcalc.core.formula_lang.parser import parse_expr, parse_tokens
from panelcalc.core.formula_lang.registry import FormulaRegistry, recompute
from panelcalc.core.formula_lang.tokenizer import Token, TokenKind, tokenize
from panelcalc.core.formula_lang.type_checker import (
    check_formula,
    infer_type,
    referenced_variables,
)

__all__ = [
    "FormulaRegistry",
    "Token",
    "TokenKind",
    "check_formula",
    "evaluate",
    "evaluate_formula",
    "evaluate_number",
    "infer_type",
    "parse_expr",
    "parse_formula",
    "parse_tokens",
    "recompute",
    "referenced_variables",
    "tokenize",
]
