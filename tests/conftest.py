"""Shared fixtures: paths to the sample pack trees under tests/fixtures."""

from pathlib import Path

import pytest

from pyavr_mcu.catalog import reset_default_catalog

FIXTURES = Path(__file__).parent / "fixtures"

# Collections present in the fixture pack trees.
FIXTURE_COLLECTIONS = ("atmega", "tiny")


@pytest.fixture
def packs_dir() -> Path:
    return FIXTURES / "packs"


@pytest.fixture
def atmega328p_path(packs_dir: Path) -> Path:
    return packs_dir / "atmega" / "ATmega328P.atdf"


@pytest.fixture(autouse=True)
def _fresh_default_catalog():
    reset_default_catalog()
    yield
    reset_default_catalog()
