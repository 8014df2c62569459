"""Load one ATDF pack file into a complete Mcu (device, variants, modules, architecture)."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .arch import c_preprocessor_name, resolve_architecture
from .builders import build_device, build_module, build_variant
from .errors import MalformedPackError, MissingElementError, PackError, StorageError
from .types import Mcu

logger = logging.getLogger(__name__)


def _section(root: ET.Element, path: str) -> ET.Element:
    found = root.find(path)
    if found is None:
        parent, _, tag = path.rpartition("/")
        raise MissingElementError(tag, parent or root.tag)
    return found


def _read_pack(root: ET.Element) -> Mcu:
    device = build_device(_section(root, "devices/device"))
    variants = tuple(build_variant(v) for v in _section(root, "variants").findall("variant"))
    modules = tuple(build_module(m) for m in _section(root, "modules").findall("module"))

    return Mcu(
        device=device,
        variants=variants,
        modules=modules,
        architecture=resolve_architecture(device.name),
        c_preprocessor_name=c_preprocessor_name(device.name),
    )


def parse_pack(text: str | bytes, path: Path | None = None) -> Mcu:
    """
    Build an Mcu from ATDF text (str, or bytes honouring the XML encoding declaration).

    Raises PackError subclasses for malformed content; path, when given, is
    attached to the error.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedPackError(f"Malformed XML: {e}", path=path) from e
    try:
        return _read_pack(root)
    except PackError as e:
        e.path = path
        raise


def load_pack(path: Path | str) -> Mcu:
    """
    Read a pack file from disk and build its Mcu.

    Raises StorageError if the file cannot be read, PackError if its content is malformed.
    """
    path = Path(path)
    logger.debug("loading pack '%s'", path)
    try:
        text = path.read_bytes()
    except OSError as e:
        raise StorageError(path, e) from e
    return parse_pack(text, path=path)
