"""
Standard parametric parts and default cabinet templates.

``STANDARD_PARTS`` holds the formulas the template editor offers when a
part type is picked. ``default_template`` builds the panel list the panel
calculator uses for a cabinet that has no custom parts.
"""

from __future__ import annotations

from dataclasses import dataclass

from panelcalc.core.ir.cabinet import Cabinet, CabinetType
from panelcalc.core.ir.templates import PanelSpec, Template

_CARCASS_DEPTH = "depth - (hasBack ? back : 0)"
_CARCASS_HEIGHT = "height - (hasTop ? topBottom : 0) - (hasBottom ? topBottom : 0)"
_INNER_WIDTH = "width - (2 * side)"


@dataclass(frozen=True)
class PartFormulas:
    width: str
    height: str


STANDARD_PARTS: dict[str, PartFormulas] = {
    "side_panel": PartFormulas(width=_CARCASS_DEPTH, height=_CARCASS_HEIGHT),
    "top_panel": PartFormulas(width=_INNER_WIDTH, height=_CARCASS_DEPTH),
    "bottom_panel": PartFormulas(width=_INNER_WIDTH, height=_CARCASS_DEPTH),
    "back_panel": PartFormulas(width=_INNER_WIDTH, height=_CARCASS_HEIGHT),
    "fixed_shelf": PartFormulas(width=f"{_INNER_WIDTH} - 3", height=f"{_CARCASS_DEPTH} - 20"),
    "adjustable_shelf": PartFormulas(
        width=f"{_INNER_WIDTH} - 6", height=f"{_CARCASS_DEPTH} - 50"
    ),
    "door": PartFormulas(width="width / doorCount - 6", height="height - 6"),
    "drawer_front": PartFormulas(width="width - 6", height="(height - 12) / drawerCount - 3"),
    "drawer_side": PartFormulas(width="depth - 80", height="(height - 12) / drawerCount - 30"),
    "drawer_back": PartFormulas(width="width - 90", height="(height - 12) / drawerCount - 30"),
    "drawer_bottom": PartFormulas(width="width - 90", height="depth - 80"),
}


def part_panel(
    part_type: str,
    name: str,
    quantity: int = 1,
    thickness_params: list[str] | None = None,
    thickness: float | None = None,
) -> PanelSpec:
    """Create a panel from one of the standard part types."""
    try:
        formulas = STANDARD_PARTS[part_type]
    except KeyError:
        raise KeyError(f"Unknown part type: {part_type!r}") from None
    return PanelSpec(
        name=name,
        formulas={"width": formulas.width, "height": formulas.height},
        quantity=quantity,
        thickness_params=thickness_params or [],
        thickness=thickness,
    )


def default_template(cabinet: Cabinet) -> Template:
    """The standard panel list for ``cabinet``.

    Side panels always; top, bottom and back unless switched off; double back
    and fixed shelf only when switched on; adjustable shelves when the
    cabinet has any; doors for every type except drawer units, which get
    drawer fronts, sides, backs and bottoms instead.
    """
    construction = cabinet.construction
    panels: list[PanelSpec] = [
        PanelSpec(
            name="Side Panel",
            formulas={"width": _CARCASS_DEPTH, "height": _CARCASS_HEIGHT},
            quantity=2,
            thickness_params=["side"],
        )
    ]

    if construction.has_top:
        panels.append(
            PanelSpec(
                name="Top Panel",
                formulas={"width": _CARCASS_DEPTH, "height": _INNER_WIDTH},
                thickness_params=["topBottom"],
            )
        )
    if construction.has_bottom:
        panels.append(
            PanelSpec(
                name="Bottom Panel",
                formulas={"width": _CARCASS_DEPTH, "height": _INNER_WIDTH},
                thickness_params=["topBottom"],
            )
        )
    if construction.has_back:
        panels.append(part_panel("back_panel", "Back Panel", thickness_params=["back"]))
    if construction.has_double_back:
        panels.append(
            part_panel("back_panel", "Double Back Panel", thickness_params=["doubleBack", "back"])
        )
    if construction.has_fixed_shelf:
        panels.append(
            PanelSpec(
                name="Fixed Shelf",
                formulas={"width": f"{_CARCASS_DEPTH} - 20", "height": f"{_INNER_WIDTH} - 3"},
                thickness_params=["shelf"],
            )
        )
    if cabinet.shelves > 0:
        panels.append(
            PanelSpec(
                name="Adjustable Shelf",
                formulas={"width": f"{_CARCASS_DEPTH} - 50", "height": f"{_INNER_WIDTH} - 6"},
                quantity=cabinet.shelves,
                thickness_params=["shelf"],
            )
        )

    if cabinet.cabinet_type == CabinetType.DRAWER:
        if cabinet.drawer_count > 0:
            panels.extend(_drawer_panels(cabinet.drawer_count))
    elif cabinet.door_count > 0:
        panels.append(_door_panel(cabinet))

    return Template(name=cabinet.name, panels=panels)


def _door_panel(cabinet: Cabinet) -> PanelSpec:
    if cabinet.cabinet_type == CabinetType.CORNER:
        return PanelSpec(
            name="Door",
            formulas={"width": "width / 2 - 3", "height": "height - 6"},
            quantity=cabinet.door_count,
            thickness_params=["door"],
        )
    return part_panel("door", "Door", quantity=cabinet.door_count, thickness_params=["door"])


def _drawer_panels(drawer_count: int) -> list[PanelSpec]:
    return [
        part_panel("drawer_front", "Drawer Front", quantity=drawer_count, thickness_params=["door"]),
        part_panel(
            "drawer_side",
            "Drawer Side",
            quantity=2 * drawer_count,
            thickness_params=["drawer"],
            thickness=15,
        ),
        part_panel(
            "drawer_back",
            "Drawer Back",
            quantity=drawer_count,
            thickness_params=["drawer"],
            thickness=15,
        ),
        part_panel(
            "drawer_bottom",
            "Drawer Bottom",
            quantity=drawer_count,
            thickness_params=["drawerBottom"],
            thickness=12,
        ),
    ]
