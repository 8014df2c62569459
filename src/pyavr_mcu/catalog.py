"""Catalog: every pack in the standard collections, loaded once and indexed by device name."""

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .errors import DuplicateDeviceError, PyAvrMcuError, StorageError, UnknownMcuError
from .loader import load_pack
from .types import Mcu

logger = logging.getLogger(__name__)

PACK_FILE_EXT = ".atdf"

# Collections (subdirectories) of the pack root, in load order.
PACK_COLLECTIONS: tuple[str, ...] = (
    "atmega",
    "tiny",
    "xmegaa",
    "xmegab",
    "xmegac",
    "xmegad",
    "xmegae",
    "automotive",
)

PACKS_ENV = "PYAVR_MCU_PACKS"


def default_pack_dir() -> Path:
    """Pack root from $PYAVR_MCU_PACKS, else the packs/ directory shipped beside the package."""
    env = os.getenv(PACKS_ENV)
    if env:
        return Path(env)
    return Path(__file__).resolve().parent / "packs"


def find_packs(directory: Path) -> list[Path]:
    """Return the pack files directly inside directory, sorted. Raise StorageError if unreadable."""
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise StorageError(directory, e) from e
    return sorted(p for p in entries if p.suffix == PACK_FILE_EXT and p.is_file())


@dataclass(frozen=True)
class PackFailure:
    """A pack that failed to load in a non-strict catalog build."""

    path: Path
    error: PyAvrMcuError


class Catalog:
    """
    Immutable, name-indexed collection of Mcu records.
    Lookup is case-insensitive; the stored names keep the casing of the pack files.
    """

    def __init__(self, mcus: Iterable[Mcu], failures: Iterable[PackFailure] = ()) -> None:
        self._mcus: tuple[Mcu, ...] = tuple(mcus)
        self._failures: tuple[PackFailure, ...] = tuple(failures)
        self._by_name: dict[str, Mcu] = {}
        for mcu in self._mcus:
            key = mcu.name.lower()
            if key in self._by_name:
                raise ValueError(f"Duplicate device in catalog: {mcu.name}")
            self._by_name[key] = mcu

    @classmethod
    def from_directory(
        cls,
        root: Path | str,
        collections: Iterable[str] = PACK_COLLECTIONS,
        strict: bool = True,
    ) -> "Catalog":
        """
        Load every pack in root/<collection>/*.atdf.

        strict=True: the first failing pack aborts the build (its error propagates).
        strict=False: per-pack errors are collected in Catalog.failures and loading
        continues. A device name (case-insensitive) seen in an earlier pack is a
        DuplicateDeviceError. A missing collection directory is fatal either way.
        """
        root = Path(root)
        paths: list[Path] = []
        for collection in collections:
            paths.extend(find_packs(root / collection))

        mcus: list[Mcu] = []
        failures: list[PackFailure] = []
        seen: dict[str, Path] = {}
        for path in paths:
            try:
                mcu = load_pack(path)
                key = mcu.name.lower()
                if key in seen:
                    raise DuplicateDeviceError(mcu.name, seen[key], path=path)
                seen[key] = path
                mcus.append(mcu)
            except PyAvrMcuError as e:
                if strict:
                    raise
                logger.warning("Failed to load pack %s: %s", path, e)
                failures.append(PackFailure(path=path, error=e))

        logger.info("Catalog loaded from %s: %d devices, %d failures", root, len(mcus), len(failures))
        return cls(mcus, failures)

    def microcontrollers(self) -> tuple[Mcu, ...]:
        return self._mcus

    def names(self) -> list[str]:
        return [m.name for m in self._mcus]

    def microcontroller(self, name: str) -> Mcu:
        """Return the Mcu with this name (any casing); raise UnknownMcuError if absent."""
        mcu = self._by_name.get(name.lower())
        if mcu is None:
            raise UnknownMcuError(name)
        return mcu

    def get(self, name: str) -> Mcu | None:
        return self._by_name.get(name.lower())

    @property
    def failures(self) -> tuple[PackFailure, ...]:
        return self._failures

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._by_name

    def __iter__(self) -> Iterator[Mcu]:
        return iter(self._mcus)

    def __len__(self) -> int:
        return len(self._mcus)


_default_catalog: Catalog | None = None
_default_lock = threading.Lock()


def get_default_catalog() -> Catalog:
    """
    Build (on first call) and return the catalog over default_pack_dir().

    The build runs under a lock, so callers see either no catalog or a complete one.
    """
    global _default_catalog
    if _default_catalog is None:
        with _default_lock:
            if _default_catalog is None:
                _default_catalog = Catalog.from_directory(default_pack_dir())
    return _default_catalog


def reset_default_catalog() -> None:
    """Forget the memoized default catalog (the next get_default_catalog() rebuilds it)."""
    global _default_catalog
    with _default_lock:
        _default_catalog = None
