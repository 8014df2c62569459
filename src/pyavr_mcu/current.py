"""The microcontroller selected for the current build, from $PYAVR_MCU_TARGET."""

import os

from .catalog import Catalog, get_default_catalog
from .types import Mcu

TARGET_ENV = "PYAVR_MCU_TARGET"


def mcu_name() -> str | None:
    """Name of the current microcontroller, if one is set."""
    name = os.getenv(TARGET_ENV, "").strip()
    return name or None


def mcu(catalog: Catalog | None = None) -> Mcu | None:
    """
    The current microcontroller, if one is set.

    Raises UnknownMcuError if the name is set but not in the catalog.
    """
    name = mcu_name()
    if name is None:
        return None
    if catalog is None:
        catalog = get_default_catalog()
    return catalog.microcontroller(name)
