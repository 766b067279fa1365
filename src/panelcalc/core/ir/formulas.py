"""
Formula AST types.

The panel formula language is deliberately small:

- Number literals: 18, 2.5
- Parameter references: width, topBottom, hasBack
- Unary minus: -side
- Arithmetic: +, -, *, /
- Conditionals: hasBack ? back : 0

``str()`` on any node prints formula source that parses back to an
equivalent tree. Binary and conditional nodes are always parenthesised, so
the printed form never depends on precedence rules.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """A numeric literal. Parsed literals are never negative."""

    value: float = Field(allow_inf_nan=False, description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.value < 0:
            return f"(-{_format_number(-self.value)})"
        return _format_number(self.value)


class VariableRef(BaseModel):
    """Reference to a cabinet parameter, e.g. ``width`` or ``hasBack``."""

    name: str = Field(description="Parameter name")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class UnaryMinus(BaseModel):
    """Arithmetic negation: -operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        # The grammar allows a single leading minus, so "--x" must be grouped.
        if isinstance(self.operand, UnaryMinus):
            return f"-({self.operand})"
        return f"-{self.operand}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class Conditional(BaseModel):
    """
    Ternary conditional: condition ? then_branch : else_branch.

    Only the selected branch is evaluated.
    """

    condition: Expr = Field(description="Must evaluate to a Boolean")
    then_branch: Expr = Field(description="Value when the condition is true")
    else_branch: Expr = Field(description="Value when the condition is false")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.condition} ? {self.then_branch} : {self.else_branch})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | VariableRef | UnaryMinus | BinaryExpr | Conditional

# Rebuild models for recursive forward references
UnaryMinus.model_rebuild()
BinaryExpr.model_rebuild()
Conditional.model_rebuild()


def _format_number(value: float) -> str:
    """Positional notation only; the tokenizer has no exponent syntax."""
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")
