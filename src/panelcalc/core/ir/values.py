"""
Runtime values for the panel formula language.

A formula only ever produces or consumes two kinds of value:

- Number: a float, used for every dimension and thickness.
- Boolean: a construction flag such as ``hasBack``.

The two kinds are kept apart on purpose. The only crossing point is
``as_number()``, which the evaluator uses when a flag appears in arithmetic
(``true`` counts as 1.0, ``false`` as 0.0).
"""

from __future__ import annotations

import math
import sys
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class ValueKind(StrEnum):
    """The two runtime value kinds."""

    NUMBER = "number"
    BOOLEAN = "boolean"


class Number(BaseModel):
    """A numeric value."""

    kind: Literal[ValueKind.NUMBER] = ValueKind.NUMBER
    value: float = Field(allow_inf_nan=False, description="Numeric payload, always finite")

    model_config = ConfigDict(frozen=True)

    @field_validator("value", mode="before")
    @classmethod
    def _reject_bool(cls, v: object) -> object:
        if isinstance(v, bool):
            raise ValueError("booleans are not numbers; use Boolean")
        return v

    def as_number(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:g}"


class Boolean(BaseModel):
    """A construction flag value."""

    kind: Literal[ValueKind.BOOLEAN] = ValueKind.BOOLEAN
    value: StrictBool = Field(description="Boolean payload")

    model_config = ConfigDict(frozen=True)

    def as_number(self) -> float:
        """Arithmetic view of a flag: true is 1.0, false is 0.0."""
        return 1.0 if self.value else 0.0

    def __str__(self) -> str:
        return "true" if self.value else "false"


Value = Annotated[Number | Boolean, Field(discriminator="kind")]

TRUE = Boolean(value=True)
FALSE = Boolean(value=False)

_FLOAT_MAX = sys.float_info.max


def to_value(raw: Number | Boolean | bool | int | float) -> Number | Boolean:
    """Wrap a plain Python scalar as a Value.

    ``bool`` is checked before ``int`` since ``True`` is an ``int`` too.
    """
    if isinstance(raw, (Number, Boolean)):
        return raw
    if isinstance(raw, bool):
        return TRUE if raw else FALSE
    if isinstance(raw, (int, float)):
        value = float(raw) if abs(raw) <= _FLOAT_MAX else math.inf
        if not math.isfinite(value):
            raise ValueError(f"Formula values must be finite, got {raw!r}")
        return Number(value=value)
    raise TypeError(f"Cannot use {type(raw).__name__} as a formula value")
