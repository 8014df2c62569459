#!/usr/bin/env python3
"""
Dev-only: report pack files whose device name has no entry in the architecture table.
Usage: python tools/check_arch_table.py [pack_root]
Run after adding packs; every reported name must be added to
src/pyavr_mcu/data/architectures.json (under "unknown" if it is deliberately unclassified).
"""

import logging
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

from pyavr_mcu.arch import get_default_table
from pyavr_mcu.catalog import PACK_COLLECTIONS, default_pack_dir, find_packs

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def device_name(path: Path) -> str | None:
    """Read devices/device/@name without building the whole model."""
    device = ET.parse(path).getroot().find("devices/device")
    return device.get("name") if device is not None else None


def main() -> int:
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else default_pack_dir()
    table = get_default_table()

    missing: list[tuple[str, Path]] = []
    checked = 0
    for collection in PACK_COLLECTIONS:
        directory = root / collection
        if not directory.is_dir():
            logger.warning("Skipping missing collection %s", directory)
            continue
        for path in find_packs(directory):
            checked += 1
            name = device_name(path)
            if name is None:
                logger.error("No devices/device in %s", path)
                missing.append(("<none>", path))
            elif name not in table:
                missing.append((name, path))

    for name, path in missing:
        print(f"{name}\t{path}")
    logger.info("Checked %d packs, %d without an architecture", checked, len(missing))
    return 1 if missing else 0


if __name__ == "__main__":
    sys.exit(main())
