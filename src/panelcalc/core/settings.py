"""
Calculator settings.

Settings come from a ``panelcalc.toml`` file:

    [cutlist]
    waste_factor = 0.15

    [[sheets]]
    name = "standard"
    width = 1220
    height = 2440

The file is looked up at ``$PANELCALC_CONFIG`` if set, otherwise
``panelcalc.toml`` in the working directory. Without a file the built-in
defaults apply (4x8 ft and 5x10 ft sheets, 15% waste).
``PANELCALC_WASTE_FACTOR`` overrides the waste factor from any source.
"""

from __future__ import annotations

import logging
import math
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PANELCALC_CONFIG"
WASTE_FACTOR_ENV_VAR = "PANELCALC_WASTE_FACTOR"
DEFAULT_CONFIG_NAME = "panelcalc.toml"

DEFAULT_WASTE_FACTOR = 0.15


@dataclass(frozen=True)
class SheetSize:
    """A stock board size in millimetres."""

    name: str
    width: float
    height: float

    @property
    def area_m2(self) -> float:
        return self.width * self.height / 1_000_000


def _default_sheets() -> list[SheetSize]:
    return [
        SheetSize(name="standard", width=1220, height=2440),  # 4x8 ft
        SheetSize(name="large", width=1525, height=3050),  # 5x10 ft
    ]


@dataclass(frozen=True)
class CutListSettings:
    """Cut list estimation settings."""

    waste_factor: float = DEFAULT_WASTE_FACTOR
    sheets: list[SheetSize] = field(default_factory=_default_sheets)


def load_settings(path: Path | None = None) -> CutListSettings:
    """Load settings from ``path``, the configured file, or defaults.

    Raises:
        FileNotFoundError: If ``path`` (or ``$PANELCALC_CONFIG``) names a
            file that does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    config_path = path or _configured_path()
    data: dict[str, Any] = {}
    if config_path is not None:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        logger.debug("Loaded settings from %s", config_path)

    cutlist_data = data.get("cutlist", {})
    waste_factor = _parse_waste_factor(cutlist_data.get("waste_factor", DEFAULT_WASTE_FACTOR))
    env_waste = os.environ.get(WASTE_FACTOR_ENV_VAR, "").strip()
    if env_waste:
        waste_factor = _parse_waste_factor(env_waste)

    sheets = [sheet for raw in data.get("sheets", []) if (sheet := _parse_sheet(raw))]
    return CutListSettings(waste_factor=waste_factor, sheets=sheets or _default_sheets())


def _configured_path() -> Path | None:
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path)
    local = Path.cwd() / DEFAULT_CONFIG_NAME
    return local if local.is_file() else None


def _parse_waste_factor(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = -1.0
    if value < 0 or math.isnan(value):
        logger.warning(
            "Invalid waste factor %r. Must be a number >= 0. Defaulting to %s.",
            raw,
            DEFAULT_WASTE_FACTOR,
        )
        return DEFAULT_WASTE_FACTOR
    return value


def _parse_sheet(raw: Any) -> SheetSize | None:
    try:
        sheet = SheetSize(name=str(raw["name"]), width=float(raw["width"]), height=float(raw["height"]))
    except (KeyError, TypeError, ValueError):
        logger.warning("Ignoring malformed sheet entry: %r", raw)
        return None
    if sheet.width <= 0 or sheet.height <= 0:
        logger.warning("Ignoring sheet %r with non-positive size", sheet.name)
        return None
    return sheet
