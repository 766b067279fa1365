"""Shared pytest fixtures for panelcalc tests."""

from __future__ import annotations

import pytest

from panelcalc.core.ir import (
    BindingSet,
    Cabinet,
    CabinetType,
    Dimensions,
    PanelSpec,
    Template,
)


@pytest.fixture
def full_bindings() -> BindingSet:
    """Every core canonical parameter bound, typical base cabinet values."""
    return BindingSet.of(
        width=600,
        height=720,
        depth=560,
        side=18,
        topBottom=18,
        back=12,
        shelf=18,
        door=18,
        hasTop=True,
        hasBottom=True,
        hasBack=True,
        isCorner=False,
    )


@pytest.fixture
def base_cabinet() -> Cabinet:
    """A 600 x 720 x 560 single door base cabinet with one shelf."""
    return Cabinet(
        name="Single Door Base Cabinet",
        cabinet_type=CabinetType.BASE,
        dimensions=Dimensions(width=600, height=720, depth=560),
    )


@pytest.fixture
def three_panel_template() -> Template:
    """Three single-formula panels; the middle one references an unknown name."""
    return Template(
        name="partial",
        panels=[
            PanelSpec(name="Top", formulas={"width": "width - (2 * side)"}),
            PanelSpec(name="Broken", formulas={"width": "width - sideX"}),
            PanelSpec(name="Side", formulas={"height": "height - topBottom - 3"}),
        ],
    )
