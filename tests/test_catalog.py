"""Tests for the Catalog: discovery, strict/non-strict builds, lookup and the default handle."""

import os
import threading
from pathlib import Path

import pytest

from pyavr_mcu import catalog as catalog_mod
from pyavr_mcu.arch import UNKNOWN_ARCHITECTURE_COUNT
from pyavr_mcu.catalog import (
    PACKS_ENV,
    Catalog,
    default_pack_dir,
    find_packs,
    get_default_catalog,
)
from pyavr_mcu.errors import (
    DuplicateDeviceError,
    InvalidLiteralError,
    StorageError,
    UnknownDeviceError,
    UnknownMcuError,
)
from pyavr_mcu.types import Architecture

from conftest import FIXTURE_COLLECTIONS, FIXTURES


@pytest.fixture
def catalog(packs_dir: Path) -> Catalog:
    return Catalog.from_directory(packs_dir, collections=FIXTURE_COLLECTIONS)


def test_find_packs_filters_extension(packs_dir: Path) -> None:
    assert [p.name for p in find_packs(packs_dir / "atmega")] == ["ATmega328P.atdf"]


def test_find_packs_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        find_packs(tmp_path / "xmegaa")


def test_catalog_lists_all(catalog: Catalog) -> None:
    assert catalog.names() == ["ATmega328P", "ATtiny816"]
    assert len(catalog) == 2
    assert [m.name for m in catalog] == catalog.names()
    assert catalog.microcontrollers()[0].name == "ATmega328P"
    assert catalog.failures == ()


def test_lookup_is_case_insensitive_and_keeps_source_casing(catalog: Catalog) -> None:
    for query in ("atmega328p", "ATMEGA328P", "ATmega328P"):
        assert catalog.microcontroller(query).device.name == "ATmega328P"
    assert "attiny816" in catalog
    assert catalog.get("ATTINY816").name == "ATtiny816"


def test_lookup_unknown_raises(catalog: Catalog) -> None:
    with pytest.raises(UnknownMcuError) as exc_info:
        catalog.microcontroller("ATmega2560")
    assert exc_info.value.name == "ATmega2560"
    assert catalog.get("ATmega2560") is None
    # The catalog is still usable after a failed lookup.
    assert len(catalog) == 2


def test_missing_collection_is_storage_error(packs_dir: Path) -> None:
    with pytest.raises(StorageError):
        Catalog.from_directory(packs_dir)


def test_strict_build_aborts_on_first_failure() -> None:
    with pytest.raises(InvalidLiteralError):
        Catalog.from_directory(FIXTURES / "broken", collections=("atmega",))


def test_unrecognized_device_fails_whole_build() -> None:
    with pytest.raises(UnknownDeviceError):
        Catalog.from_directory(FIXTURES / "unknown", collections=("atmega",))


def test_non_strict_build_collects_failures() -> None:
    cat = Catalog.from_directory(FIXTURES / "broken", collections=("atmega",), strict=False)
    assert cat.names() == ["ATmega328P"]
    (failure,) = cat.failures
    assert failure.path.name == "ATmega168A.atdf"
    assert isinstance(failure.error, InvalidLiteralError)


def test_duplicate_device_names_rejected(catalog: Catalog) -> None:
    mcu = catalog.microcontroller("ATmega328P")
    with pytest.raises(ValueError, match="Duplicate device"):
        Catalog([mcu, mcu])


DUPLICATE_COLLECTIONS = ("atmega", "automotive")


def test_duplicate_pack_aborts_strict_build() -> None:
    with pytest.raises(DuplicateDeviceError) as exc_info:
        Catalog.from_directory(FIXTURES / "duplicate", collections=DUPLICATE_COLLECTIONS)
    err = exc_info.value
    assert err.name == "ATmega328P"
    assert err.first == FIXTURES / "duplicate" / "atmega" / "ATmega328P.atdf"
    assert err.path == FIXTURES / "duplicate" / "automotive" / "ATmega328P.atdf"


def test_duplicate_pack_recorded_as_failure() -> None:
    cat = Catalog.from_directory(FIXTURES / "duplicate", collections=DUPLICATE_COLLECTIONS, strict=False)
    assert cat.names() == ["ATmega328P"]
    (failure,) = cat.failures
    assert failure.path.parent.name == "automotive"
    assert isinstance(failure.error, DuplicateDeviceError)


def test_default_pack_dir_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(PACKS_ENV, str(tmp_path))
    assert default_pack_dir() == tmp_path
    monkeypatch.delenv(PACKS_ENV)
    assert default_pack_dir().name == "packs"


def test_default_catalog_is_built_once(monkeypatch: pytest.MonkeyPatch, packs_dir: Path) -> None:
    calls = []
    real = Catalog.from_directory.__func__

    def fake_from_directory(cls, root, collections=FIXTURE_COLLECTIONS, strict=True):
        calls.append(root)
        return real(cls, root, collections=FIXTURE_COLLECTIONS, strict=strict)

    monkeypatch.setattr(Catalog, "from_directory", classmethod(fake_from_directory))
    monkeypatch.setenv(PACKS_ENV, str(packs_dir))

    results = []
    threads = [threading.Thread(target=lambda: results.append(get_default_catalog())) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert all(r is results[0] for r in results)
    assert get_default_catalog() is results[0]

    catalog_mod.reset_default_catalog()
    assert get_default_catalog() is not results[0]
    assert len(calls) == 2


@pytest.mark.skipif(
    not os.getenv(PACKS_ENV) or not Path(os.environ[PACKS_ENV], "atmega").is_dir(),
    reason=f"full pack corpus not available (set {PACKS_ENV})",
)
def test_full_corpus() -> None:
    cat = get_default_catalog()
    assert len(cat) > 100, "there should be at least 100 microcontrollers"
    unknown = [m.name for m in cat if m.architecture is Architecture.UNKNOWN]
    assert len(unknown) == UNKNOWN_ARCHITECTURE_COUNT
    assert cat.microcontroller("atmega328p").name == "ATmega328P"
