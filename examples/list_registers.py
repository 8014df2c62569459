#!/usr/bin/env python3
"""Example: print the register map of one device from a pack directory."""

import sys

from pyavr_mcu import Catalog
from pyavr_mcu.errors import PackError, StorageError, UnknownMcuError


def main() -> None:
    packs = "packs"  # change to your pack root (contains atmega/, tiny/, ...)
    name = sys.argv[1] if len(sys.argv) > 1 else "ATmega328P"

    try:
        mcu = Catalog.from_directory(packs).microcontroller(name)
    except UnknownMcuError as e:
        print(f"Unknown device: {e}", file=sys.stderr)
        sys.exit(1)
    except StorageError as e:
        print(f"Cannot read packs: {e}", file=sys.stderr)
        sys.exit(1)
    except PackError as e:
        print(f"Malformed pack: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{mcu.name} ({mcu.architecture.value}, {mcu.c_preprocessor_name})")
    for module in mcu.modules:
        for group in module.register_groups:
            for reg in group.registers:
                mask = f"0x{reg.mask:0{reg.size * 2}X}" if reg.mask is not None else "-"
                print(f"  {module.name}.{group.name}.{reg.name:<10} @0x{reg.offset:04X} {reg.rw.value:<10} mask={mask}")
                for bf in reg.bitfields:
                    print(f"      {bf.name:<10} 0x{bf.mask:0{bf.size * 2}X} {bf.caption}")


if __name__ == "__main__":
    main()
