"""
Error types for formula tokenizing, parsing and evaluation.

The tokenizer, parser and evaluator raise these exceptions. Every one of them
exposes ``payload``, the structured error value (see
``panelcalc.core.ir.diagnostics``) that the public API returns in place of
raising.
"""

from __future__ import annotations

from panelcalc.core.ir.diagnostics import (
    DivisionByZero,
    EvaluationError,
    NumericOverflow,
    ParseError,
    TypeMismatch,
    UndefinedVariable,
)
from panelcalc.core.ir.values import ValueKind


class FormulaError(Exception):
    """Base exception for all formula errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def payload(self) -> EvaluationError:
        """The structured error value. Every raised subclass provides one."""
        raise NotImplementedError(f"{type(self).__name__} has no payload")


class FormulaSyntaxError(FormulaError):
    """
    Raised when formula source cannot be tokenized or parsed.

    Examples:
    - Unrecognised character: ``width # 2``
    - Dangling operator: ``width -``
    - Unmatched parenthesis: ``(width - side``
    - Ternary without ``:``: ``hasBack ? back``
    """

    def __init__(self, message: str, position: int) -> None:
        self.position = position
        super().__init__(message)

    @property
    def payload(self) -> ParseError:
        return ParseError(position=self.position, message=self.message)

    def format(self, source: str) -> str:
        """
        Render the message under the offending source with a marker.

        Returns:
            Formatted string like::

                width - * 2
                        ^
                Expected number, identifier or '(', got '*'
        """
        marker = " " * min(self.position, len(source)) + "^"
        return f"{source}\n{marker}\n{self.message}"


class FormulaEvaluationError(FormulaError):
    """Base for errors raised while walking a parsed formula."""


class UndefinedVariableError(FormulaEvaluationError):
    """Raised when a formula reads a parameter that is not bound."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Undefined variable: {name}")

    @property
    def payload(self) -> UndefinedVariable:
        return UndefinedVariable(name=self.name)


class TypeMismatchError(FormulaEvaluationError):
    """
    Raised when a value of the wrong kind reaches a typed position.

    Examples:
    - Number used as a ternary condition: ``width ? 1 : 2``
    - Boolean as the final result: ``hasBack``
    """

    def __init__(self, expected: ValueKind, found: ValueKind, context: str) -> None:
        self.expected = expected
        self.found = found
        self.context = context
        super().__init__(f"Expected {expected} in {context}, found {found}")

    @property
    def payload(self) -> TypeMismatch:
        return TypeMismatch(expected=self.expected, found=self.found, context=self.context)


class DivisionByZeroError(FormulaEvaluationError):
    """Raised when a ``/`` has a zero divisor."""

    def __init__(self) -> None:
        super().__init__("Division by zero")

    @property
    def payload(self) -> DivisionByZero:
        return DivisionByZero()


class NumericOverflowError(FormulaEvaluationError):
    """Raised when an arithmetic result is not a finite number."""

    def __init__(self, op: str) -> None:
        self.op = op
        super().__init__(f"Result of '{op}' is out of range")

    @property
    def payload(self) -> NumericOverflow:
        return NumericOverflow(op=self.op)
