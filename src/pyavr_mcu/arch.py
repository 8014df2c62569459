"""ArchitectureTable: device name -> AVR architecture, from embedded JSON via importlib.resources."""

import json
import logging
import re
from functools import lru_cache
from importlib import resources
from typing import Any

from .errors import UnknownDeviceError
from .types import ArchInfo, Architecture

logger = logging.getLogger(__name__)

_TABLE_PACKAGE = "pyavr_mcu.data"
_TABLE_RESOURCE = "architectures.json"

# Devices deliberately left unclassified. Changing the Unknown list means changing this.
UNKNOWN_ARCHITECTURE_COUNT = 11

# Longest first so "XMEGA" is not half-rewritten by "MEGA".
_LOWERCASE_FAMILIES = re.compile("XMEGA|MEGA|TINY")


def _parse_table(raw: dict[str, Any]) -> dict[str, Architecture]:
    """Build the lower-case name index from {architecture: [names]}."""
    by_name: dict[str, Architecture] = {}
    for arch_str, names in raw.items():
        try:
            arch = Architecture(arch_str)
        except ValueError:
            raise ValueError(f"Unknown architecture {arch_str!r} in architecture table") from None
        if not isinstance(names, list):
            raise ValueError(f"Architecture {arch_str!r} must map to a list of device names")
        for name in names:
            key = name.lower()
            if key in by_name:
                raise ValueError(f"Duplicate device in architecture table: {name}")
            by_name[key] = arch
    return by_name


class ArchitectureTable:
    """
    Case-insensitive map of every known device name to its Architecture.
    Names outside the table are an error, not Architecture.UNKNOWN.
    """

    def __init__(self, table_override: dict[str, list[str]] | None = None) -> None:
        if table_override is not None:
            self._by_name = _parse_table(table_override)
            logger.debug("ArchitectureTable loaded from override: %d devices", len(self._by_name))
            return

        try:
            with resources.files(_TABLE_PACKAGE).joinpath(_TABLE_RESOURCE).open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(
                f"Architecture table resource not found: {_TABLE_PACKAGE}/{_TABLE_RESOURCE}"
            ) from None

        self._by_name = _parse_table(data)
        logger.debug("ArchitectureTable loaded: %d devices", len(self._by_name))

    def resolve(self, name: str) -> Architecture:
        """Return the Architecture for a device name; raise UnknownDeviceError if unlisted."""
        arch = self._by_name.get(name.lower())
        if arch is None:
            raise UnknownDeviceError(name)
        return arch

    def unknown_names(self) -> list[str]:
        """Lower-cased names of devices classified as Architecture.UNKNOWN."""
        return sorted(n for n, a in self._by_name.items() if a is Architecture.UNKNOWN)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


@lru_cache(maxsize=1)
def get_default_table() -> ArchitectureTable:
    """Load (once) and return the embedded architecture table."""
    return ArchitectureTable()


def resolve_architecture(name: str) -> Architecture:
    """Classify a device by name using the embedded table."""
    return get_default_table().resolve(name)


def c_preprocessor_name(name: str) -> str:
    """
    Symbolic name GCC defines for a device, e.g. ATmega328P -> __AVR_ATmega328P__.

    Upper-cases the name, then lower-cases the XMEGA/MEGA/TINY family parts.
    """
    canonical = _LOWERCASE_FAMILIES.sub(lambda m: m.group(0).lower(), name.upper())
    return f"__AVR_{canonical}__"


def lookup(name: str) -> ArchInfo:
    """Architecture and preprocessor name for a device, without reading any pack."""
    return ArchInfo(architecture=resolve_architecture(name), c_preprocessor_name=c_preprocessor_name(name))
