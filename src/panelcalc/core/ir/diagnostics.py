"""
Structured formula errors.

These are the values handed to the template editor when a formula cannot be
parsed or evaluated. They carry data only (position, variable name, kinds);
wording for the user is left to the caller, although ``str()`` gives a
reasonable default.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from panelcalc.core.ir.values import ValueKind


class ErrorKind(StrEnum):
    """Discriminator for the evaluation error union."""

    PARSE_ERROR = "parse_error"
    UNDEFINED_VARIABLE = "undefined_variable"
    TYPE_MISMATCH = "type_mismatch"
    DIVISION_BY_ZERO = "division_by_zero"
    NUMERIC_OVERFLOW = "numeric_overflow"
    DUPLICATE_NAME = "duplicate_name"


class ParseError(BaseModel):
    """Malformed formula source."""

    kind: Literal[ErrorKind.PARSE_ERROR] = ErrorKind.PARSE_ERROR
    position: int = Field(ge=0, description="Offset into the source where parsing stopped")
    message: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.message} (at position {self.position})"


class UndefinedVariable(BaseModel):
    """A formula referenced a parameter that is not bound."""

    kind: Literal[ErrorKind.UNDEFINED_VARIABLE] = ErrorKind.UNDEFINED_VARIABLE
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Undefined variable: {self.name}"


class TypeMismatch(BaseModel):
    """A Boolean was used where a Number was required, or vice versa."""

    kind: Literal[ErrorKind.TYPE_MISMATCH] = ErrorKind.TYPE_MISMATCH
    expected: ValueKind
    found: ValueKind
    context: str = Field(description="Where the mismatch happened, e.g. 'condition'")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Expected {self.expected} in {self.context}, found {self.found}"


class DivisionByZero(BaseModel):
    """A ``/`` had a zero divisor."""

    kind: Literal[ErrorKind.DIVISION_BY_ZERO] = ErrorKind.DIVISION_BY_ZERO

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "Division by zero"


class NumericOverflow(BaseModel):
    """An arithmetic result was too large to represent as a finite number."""

    kind: Literal[ErrorKind.NUMERIC_OVERFLOW] = ErrorKind.NUMERIC_OVERFLOW
    op: str = Field(description="The operator whose result overflowed")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Result of '{self.op}' is out of range"


class DuplicateName(BaseModel):
    """Two formulas in one batch share a name, so neither result can be reported."""

    kind: Literal[ErrorKind.DUPLICATE_NAME] = ErrorKind.DUPLICATE_NAME
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Duplicate formula name: {self.name}"


EvaluationError = Annotated[
    ParseError
    | UndefinedVariable
    | TypeMismatch
    | DivisionByZero
    | NumericOverflow
    | DuplicateName,
    Field(discriminator="kind"),
]

EVALUATION_ERROR_TYPES = (
    ParseError,
    UndefinedVariable,
    TypeMismatch,
    DivisionByZero,
    NumericOverflow,
    DuplicateName,
)


def is_error(outcome: object) -> bool:
    """True if a recompute outcome is an error rather than a number."""
    return isinstance(outcome, EVALUATION_ERROR_TYPES)
