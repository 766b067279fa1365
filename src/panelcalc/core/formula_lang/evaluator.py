"""
Formula evaluator.

Evaluates formula AST nodes against a binding set. Pure evaluation: no I/O,
no side effects, nothing retained between calls. Does NOT use Python's
eval(); only the closed set of AST node types is handled.

Coercion rules:
- Arithmetic (unary minus, + - * /) accepts flags and reads them as
  1.0 (true) or 0.0 (false).
- A ternary condition must be a Boolean; a Number there is a type mismatch.
- A formula's final result must be a Number.
- Every Number produced is finite; an operation that overflows is an error.
"""

from __future__ import annotations

import math

from panelcalc.core.errors import (
    DivisionByZeroError,
    NumericOverflowError,
    TypeMismatchError,
    UndefinedVariableError,
)
from panelcalc.core.ir.bindings import BindingSet
from panelcalc.core.ir.formulas import (
    BinaryExpr,
    BinaryOp,
    Conditional,
    Expr,
    NumberLiteral,
    UnaryMinus,
    VariableRef,
)
from panelcalc.core.ir.values import Boolean, Number, ValueKind


def evaluate(expr: Expr, bindings: BindingSet) -> Number | Boolean:
    """Evaluate a formula AST against a binding set.

    Args:
        expr: Parsed formula AST.
        bindings: Parameter snapshot to read variables from.

    Returns:
        The computed Value.

    Raises:
        UndefinedVariableError: A referenced parameter is not bound.
        TypeMismatchError: A Number was used as a ternary condition.
        DivisionByZeroError: A divisor evaluated to zero.
        NumericOverflowError: An arithmetic result was not finite.
    """
    return _interpret(expr, bindings)


def evaluate_number(expr: Expr, bindings: BindingSet) -> float:
    """Evaluate a formula that must produce a panel dimension.

    Same as ``evaluate`` but a Boolean result is a ``TypeMismatchError``.
    """
    result = _interpret(expr, bindings)
    if isinstance(result, Boolean):
        raise TypeMismatchError(ValueKind.NUMBER, ValueKind.BOOLEAN, "formula result")
    return result.value


def _interpret(expr: Expr, bindings: BindingSet) -> Number | Boolean:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, NumberLiteral):
        return Number(value=expr.value)

    if isinstance(expr, VariableRef):
        value = bindings.get(expr.name)
        if value is None:
            raise UndefinedVariableError(expr.name)
        return value

    if isinstance(expr, UnaryMinus):
        operand = _interpret(expr.operand, bindings)
        return Number(value=-operand.as_number())

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, bindings)

    if isinstance(expr, Conditional):
        return _interpret_conditional(expr, bindings)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_binary(expr: BinaryExpr, bindings: BindingSet) -> Number:
    """Evaluate a binary expression, left operand first."""
    left = _interpret(expr.left, bindings).as_number()
    right = _interpret(expr.right, bindings).as_number()

    if expr.op == BinaryOp.ADD:
        result = left + right
    elif expr.op == BinaryOp.SUB:
        result = left - right
    elif expr.op == BinaryOp.MUL:
        result = left * right
    elif expr.op == BinaryOp.DIV:
        if right == 0:
            raise DivisionByZeroError()
        result = left / right
    else:
        raise TypeError(f"Unknown binary op: {expr.op}")

    if not math.isfinite(result):
        raise NumericOverflowError(expr.op.value)
    return Number(value=result)


def _interpret_conditional(expr: Conditional, bindings: BindingSet) -> Number | Boolean:
    """Evaluate only the branch selected by a Boolean condition."""
    condition = _interpret(expr.condition, bindings)
    if not isinstance(condition, Boolean):
        raise TypeMismatchError(ValueKind.BOOLEAN, condition.kind, "ternary condition")
    if condition.value:
        return _interpret(expr.then_branch, bindings)
    return _interpret(expr.else_branch, bindings)
