#!/usr/bin/env python3
"""Command-line interface for pyavr-mcu using Typer."""

import json
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .arch import lookup
from .catalog import PACK_COLLECTIONS, PACKS_ENV, Catalog, default_pack_dir
from .errors import PackError, StorageError, UnknownDeviceError, UnknownMcuError
from .types import Mcu

app = typer.Typer(
    name="pyavr",
    help="Inspect AVR microcontroller models built from Atmel ATDF pack files.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

PacksOption = Annotated[
    Optional[Path],
    typer.Option("--packs", help="Pack root directory (contains atmega/, tiny/, ...)", envvar=PACKS_ENV),
]
CollectionOption = Annotated[
    Optional[list[str]],
    typer.Option("--collection", "-c", help="Pack collection to load (repeatable; default: all standard collections)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_catalog(packs: Optional[Path], collections: Optional[list[str]] = None) -> Catalog:
    """Load the catalog from --packs (or the default pack directory) and the chosen collections."""
    root = packs if packs is not None else default_pack_dir()
    return Catalog.from_directory(root, collections=collections or PACK_COLLECTIONS)


def mcu_summary(mcu: Mcu) -> dict[str, Any]:
    """JSON-friendly summary of one microcontroller."""
    return {
        "name": mcu.name,
        "architecture": mcu.architecture.value,
        "c_preprocessor_name": mcu.c_preprocessor_name,
        "variants": [v.name for v in mcu.variants],
        "address_spaces": [
            {"id": a.id, "start": a.start_address, "size": a.size} for a in mcu.device.address_spaces
        ],
        "peripherals": [p.name for p in mcu.device.peripherals],
        "modules": [m.name for m in mcu.modules],
        "interrupts": len(mcu.device.interrupts),
        "registers": sum(1 for _ in mcu.registers()),
    }


def fail(message: str, code: int) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code)


# ============================================================================
# Commands
# ============================================================================


@app.command("list")
def list_mcus(
    packs: PacksOption = None,
    collection: CollectionOption = None,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """List every microcontroller in the pack directory with its architecture."""
    setup_logging(verbose)

    try:
        catalog = load_catalog(packs, collection)
    except UnknownDeviceError as e:
        fail(str(e), 2)
    except StorageError as e:
        fail(f"Storage error: {e}", 3)
    except PackError as e:
        fail(f"Malformed pack: {e}", 4)
    except Exception as e:
        if verbose:
            import traceback
            traceback.print_exc()
        fail(f"Unexpected error: {e}", 4)

    if json_output:
        rows = [{"name": m.name, "architecture": m.architecture.value} for m in catalog]
        typer.echo(json.dumps(rows, indent=2))
    else:
        for m in catalog:
            typer.echo(f"{m.name:<20} {m.architecture.value}")


@app.command()
def show(
    name: Annotated[str, typer.Argument(help="Device name, any casing (e.g. atmega328p)")],
    packs: PacksOption = None,
    collection: CollectionOption = None,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """Show a summary of one microcontroller."""
    setup_logging(verbose)

    try:
        mcu = load_catalog(packs, collection).microcontroller(name)
    except (UnknownMcuError, UnknownDeviceError) as e:
        fail(str(e), 2)
    except StorageError as e:
        fail(f"Storage error: {e}", 3)
    except PackError as e:
        fail(f"Malformed pack: {e}", 4)
    except Exception as e:
        if verbose:
            import traceback
            traceback.print_exc()
        fail(f"Unexpected error: {e}", 4)

    summary = mcu_summary(mcu)
    if json_output:
        typer.echo(json.dumps(summary, indent=2))
        return

    typer.echo(f"Device: {summary['name']}")
    typer.echo(f"Architecture: {summary['architecture']}")
    typer.echo(f"Preprocessor: {summary['c_preprocessor_name']}")
    typer.echo(f"Variants: {', '.join(summary['variants']) or '-'}")
    for space in summary["address_spaces"]:
        typer.echo(f"Address space {space['id']}: start=0x{space['start']:X} size=0x{space['size']:X}")
    typer.echo(f"Peripherals: {', '.join(summary['peripherals']) or '-'}")
    typer.echo(f"Modules: {len(summary['modules'])}, registers: {summary['registers']}")
    typer.echo(f"Interrupts: {summary['interrupts']}")


@app.command()
def arch(
    name: Annotated[str, typer.Argument(help="Device name, any casing")],
    json_output: JsonOption = False,
) -> None:
    """Show the architecture and C preprocessor name of a device (no packs are read)."""
    try:
        info = lookup(name)
    except UnknownDeviceError as e:
        fail(str(e), 2)

    if json_output:
        typer.echo(
            json.dumps({"architecture": info.architecture.value, "c_preprocessor_name": info.c_preprocessor_name})
        )
    else:
        typer.echo(f"{info.architecture.value} {info.c_preprocessor_name}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pyavr-mcu {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """pyavr - inspect AVR microcontroller models from ATDF pack files."""
    pass


if __name__ == "__main__":
    app()
