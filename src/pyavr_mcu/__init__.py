"""pyavr-mcu: typed, queryable models of AVR microcontrollers built from Atmel ATDF pack files."""

__version__ = "0.1.0"

from .arch import ArchitectureTable, c_preprocessor_name, lookup, resolve_architecture
from .catalog import Catalog, PackFailure, find_packs, get_default_catalog
from .errors import (
    DuplicateDeviceError,
    InvalidLiteralError,
    MalformedPackError,
    MissingAttributeError,
    MissingElementError,
    PackError,
    PyAvrMcuError,
    StorageError,
    UnexpectedElementError,
    UnknownDeviceError,
    UnknownMcuError,
)
from .loader import load_pack, parse_pack
from .types import (
    AddressSpace,
    ArchInfo,
    Architecture,
    Bitfield,
    Device,
    Instance,
    Interrupt,
    Mcu,
    MemorySegment,
    Module,
    Peripheral,
    ReadWrite,
    Register,
    RegisterGroup,
    Signal,
    Value,
    ValueGroup,
    Variant,
    union,
)

__all__ = [
    "__version__",
    "ArchitectureTable",
    "c_preprocessor_name",
    "lookup",
    "resolve_architecture",
    "Catalog",
    "PackFailure",
    "find_packs",
    "get_default_catalog",
    "InvalidLiteralError",
    "MalformedPackError",
    "MissingAttributeError",
    "MissingElementError",
    "PackError",
    "PyAvrMcuError",
    "StorageError",
    "UnexpectedElementError",
    "UnknownDeviceError",
    "UnknownMcuError",
    "load_pack",
    "parse_pack",
    "AddressSpace",
    "ArchInfo",
    "Architecture",
    "Bitfield",
    "Device",
    "Instance",
    "Interrupt",
    "Mcu",
    "MemorySegment",
    "Module",
    "Peripheral",
    "ReadWrite",
    "Register",
    "RegisterGroup",
    "Signal",
    "Value",
    "ValueGroup",
    "Variant",
    "union",
]
