"""
Static checks for panel formulas.

Infers a formula's result kind and finds problems that are visible without
evaluating it: references to non-canonical parameters, Number conditions,
Boolean results. Used by the template editor to flag a formula on save;
evaluation against real bindings remains the final word.
"""

from __future__ import annotations

from collections.abc import Mapping

from panelcalc.core.ir.bindings import CANONICAL_PARAMETERS
from panelcalc.core.ir.diagnostics import EvaluationError, TypeMismatch, UndefinedVariable
from panelcalc.core.ir.formulas import (
    BinaryExpr,
    Conditional,
    Expr,
    NumberLiteral,
    UnaryMinus,
    VariableRef,
)
from panelcalc.core.ir.values import ValueKind

# Maps parameter names to their value kinds
ParameterTypes = Mapping[str, ValueKind]


def infer_type(expr: Expr, param_types: ParameterTypes | None = None) -> ValueKind | None:
    """Infer the result kind of a formula.

    Args:
        expr: Formula AST node.
        param_types: Parameter name -> kind. Defaults to the canonical set.

    Returns:
        The inferred ValueKind, or None when it cannot be known statically
        (unknown parameter, or conditional branches of different kinds).
    """
    types = CANONICAL_PARAMETERS if param_types is None else param_types
    return _infer(expr, types)


def _infer(expr: Expr, types: ParameterTypes) -> ValueKind | None:
    if isinstance(expr, VariableRef):
        return types.get(expr.name)

    if isinstance(expr, (NumberLiteral, UnaryMinus, BinaryExpr)):
        # Arithmetic always yields a number, flags included
        return ValueKind.NUMBER

    if isinstance(expr, Conditional):
        then_t = _infer(expr.then_branch, types)
        else_t = _infer(expr.else_branch, types)
        return then_t if then_t == else_t else None

    return None


def referenced_variables(expr: Expr) -> frozenset[str]:
    """Every parameter name a formula mentions, in any branch."""
    names: set[str] = set()
    _collect(expr, names)
    return frozenset(names)


def _collect(expr: Expr, names: set[str]) -> None:
    if isinstance(expr, VariableRef):
        names.add(expr.name)
    elif isinstance(expr, UnaryMinus):
        _collect(expr.operand, names)
    elif isinstance(expr, BinaryExpr):
        _collect(expr.left, names)
        _collect(expr.right, names)
    elif isinstance(expr, Conditional):
        _collect(expr.condition, names)
        _collect(expr.then_branch, names)
        _collect(expr.else_branch, names)


def check_formula(
    expr: Expr,
    param_types: ParameterTypes | None = None,
) -> list[EvaluationError]:
    """List the problems detectable without bindings.

    Unknown parameters are reported in sorted order, followed by condition
    mismatches in source order and finally a Boolean top-level result.
    """
    types = CANONICAL_PARAMETERS if param_types is None else param_types
    problems: list[EvaluationError] = [
        UndefinedVariable(name=name)
        for name in sorted(referenced_variables(expr))
        if name not in types
    ]
    _check_conditions(expr, types, problems)
    if _infer(expr, types) == ValueKind.BOOLEAN:
        problems.append(
            TypeMismatch(
                expected=ValueKind.NUMBER,
                found=ValueKind.BOOLEAN,
                context="formula result",
            )
        )
    return problems


def _check_conditions(expr: Expr, types: ParameterTypes, problems: list[EvaluationError]) -> None:
    if isinstance(expr, Conditional):
        if _infer(expr.condition, types) == ValueKind.NUMBER:
            problems.append(
                TypeMismatch(
                    expected=ValueKind.BOOLEAN,
                    found=ValueKind.NUMBER,
                    context="ternary condition",
                )
            )
        _check_conditions(expr.condition, types, problems)
        _check_conditions(expr.then_branch, types, problems)
        _check_conditions(expr.else_branch, types, problems)
    elif isinstance(expr, UnaryMinus):
        _check_conditions(expr.operand, types, problems)
    elif isinstance(expr, BinaryExpr):
        _check_conditions(expr.left, types, problems)
        _check_conditions(expr.right, types, problems)
