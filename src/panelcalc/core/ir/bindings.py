"""
Binding sets: the parameter values a formula is evaluated against.

A binding set is an immutable snapshot of one cabinet's canonical
parameters. Editing a dimension or toggling a flag produces a new snapshot
via ``with_updates``; an evaluation pass therefore never sees a half-updated
set of parameters.

Only canonical parameter names may be bound, and each must hold the kind of
value its name implies (thicknesses and dimensions are numbers, ``has*`` and
``isCorner`` are flags). Any canonical parameter may be left unbound, in
which case a formula that reads it fails with ``UndefinedVariable``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from panelcalc.core.ir.values import Boolean, Number, Value, ValueKind, to_value

# ---------------------------------------------------------------------------
# Canonical parameters
# ---------------------------------------------------------------------------

NUMBER_PARAMETERS: tuple[str, ...] = (
    "width",
    "height",
    "depth",
    "side",
    "topBottom",
    "back",
    "shelf",
    "door",
)
FLAG_PARAMETERS: tuple[str, ...] = ("hasTop", "hasBottom", "hasBack", "isCorner")

# Optional material thicknesses, counts and flags carried by richer templates
EXTENDED_NUMBER_PARAMETERS: tuple[str, ...] = (
    "drawer",
    "fixedPanel",
    "drawerBottom",
    "uprights",
    "doubleBack",
    "doorCount",
    "drawerCount",
)
EXTENDED_FLAG_PARAMETERS: tuple[str, ...] = (
    "hasDoubleBack",
    "hasToe",
    "hasFixedShelf",
    "hasFrontPanel",
    "hasFillerPanel",
    "hasUprights",
)

CANONICAL_PARAMETERS: dict[str, ValueKind] = {
    **{name: ValueKind.NUMBER for name in NUMBER_PARAMETERS + EXTENDED_NUMBER_PARAMETERS},
    **{name: ValueKind.BOOLEAN for name in FLAG_PARAMETERS + EXTENDED_FLAG_PARAMETERS},
}


class BindingSet(BaseModel):
    """Immutable snapshot of canonical parameter values for one cabinet."""

    params: dict[str, Value] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("params", mode="before")
    @classmethod
    def _wrap_scalars(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return {
                name: raw if isinstance(raw, Mapping) else to_value(raw)
                for name, raw in v.items()
            }
        return v

    @model_validator(mode="after")
    def _check_canonical(self) -> BindingSet:
        for name, value in self.params.items():
            expected = CANONICAL_PARAMETERS.get(name)
            if expected is None:
                raise ValueError(f"'{name}' is not a canonical cabinet parameter")
            if value.kind != expected:
                raise ValueError(f"Parameter '{name}' must be a {expected}, got {value.kind}")
        return self

    @classmethod
    def of(cls, **params: bool | int | float | Number | Boolean) -> BindingSet:
        """Build a snapshot from keyword arguments, e.g. ``of(width=600, hasBack=True)``."""
        return cls(params=params)

    def get(self, name: str) -> Number | Boolean | None:
        return self.params.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.params

    def __len__(self) -> int:
        return len(self.params)

    def names(self) -> list[str]:
        return list(self.params)

    def with_updates(self, **changes: bool | int | float | Number | Boolean) -> BindingSet:
        """Return a new snapshot with ``changes`` applied; ``self`` is untouched."""
        return BindingSet(params={**self.params, **changes})

    def without(self, *names: str) -> BindingSet:
        """Return a new snapshot with ``names`` unbound."""
        return BindingSet(params={k: v for k, v in self.params.items() if k not in names})

    def as_dict(self) -> dict[str, float | bool]:
        """Plain Python view, e.g. for display."""
        return {name: value.value for name, value in self.params.items()}
