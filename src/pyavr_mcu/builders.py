"""
Build model records from ATDF elements, one build_* function per schema element.

A register group, for example, looks like so::

    <register-group caption="EEPROM" name="EEPROM">
      <register caption="EEPROM Address Register Bytes" name="EEAR" offset="0x41" size="2" mask="0x01FF"/>
      <register caption="EEPROM Data Register" name="EEDR" offset="0x40" size="1" mask="0xFF"/>
    </register-group>
"""

import logging
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Iterator

from .errors import MissingAttributeError, MissingElementError, UnexpectedElementError
from .literals import decode_float, decode_int, decode_optional_int, decode_permissions
from .types import (
    AddressSpace,
    Bitfield,
    Device,
    Instance,
    Interrupt,
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
)

logger = logging.getLogger(__name__)


class ChildPolicy(str, Enum):
    """What to do with a child element the builder does not recognize."""

    SKIP = "skip"
    STRICT = "strict"


# Atmel has added children to these elements without notice (nested
# register-group in ATtiny816, parameters in modules), so unknown children are
# skipped. A value-group is a closed enumeration, so anything but <value> fails.
CHILD_POLICY: dict[str, ChildPolicy] = {
    "peripheral": ChildPolicy.SKIP,
    "instance": ChildPolicy.SKIP,
    "module": ChildPolicy.SKIP,
    "register-group": ChildPolicy.SKIP,
    "register": ChildPolicy.SKIP,
    "value-group": ChildPolicy.STRICT,
}

_RW_MODES: dict[str, ReadWrite] = {
    "R": ReadWrite.READ_ONLY,
    "W": ReadWrite.WRITE_ONLY,
}


def _attr(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise MissingAttributeError(name, element.tag)
    return value


def _int(element: ET.Element, name: str) -> int:
    return decode_int(element.get(name), attribute=name, element=element.tag)


def _opt_int(element: ET.Element, name: str) -> int | None:
    return decode_optional_int(element.get(name), attribute=name, element=element.tag)


def _child(element: ET.Element, tag: str) -> ET.Element:
    found = element.find(tag)
    if found is None:
        raise MissingElementError(tag, element.tag)
    return found


def _children(element: ET.Element, policy_key: str, accepted: set[str]) -> Iterator[ET.Element]:
    """Yield children whose tag is accepted; apply CHILD_POLICY[policy_key] to the rest."""
    policy = CHILD_POLICY[policy_key]
    for child in element:
        if child.tag in accepted:
            yield child
        elif policy is ChildPolicy.STRICT:
            raise UnexpectedElementError(child.tag, element.tag)
        else:
            logger.debug("Skipping <%s> in <%s %s>", child.tag, element.tag, element.get("name", ""))


def build_device(element: ET.Element) -> Device:
    """Build a Device; <peripherals>, <address-spaces> and <interrupts> are required."""
    name = _attr(element, "name")

    # Real packs use <module> for the children of <peripherals>, so any tag is accepted.
    peripherals = tuple(build_peripheral(p) for p in _child(element, "peripherals"))
    address_spaces = tuple(
        build_address_space(a) for a in _child(element, "address-spaces").findall("address-space")
    )
    interrupts = tuple(build_interrupt(i) for i in _child(element, "interrupts").findall("interrupt"))

    return Device(
        name=name,
        address_spaces=address_spaces,
        peripherals=peripherals,
        interrupts=interrupts,
    )


def build_variant(element: ET.Element) -> Variant:
    return Variant(
        name=_attr(element, "ordercode"),
        package=_attr(element, "package"),
        pinout=element.get("pinout"),
        temperature_min=_int(element, "tempmin"),
        temperature_max=_int(element, "tempmax"),
        voltage_min=decode_float(element.get("vccmin"), attribute="vccmin", element=element.tag),
        voltage_max=decode_float(element.get("vccmax"), attribute="vccmax", element=element.tag),
        speed_max_hz=_int(element, "speedmax"),
    )


def build_peripheral(element: ET.Element) -> Peripheral:
    instances = tuple(build_instance(i) for i in _children(element, "peripheral", {"instance"}))
    return Peripheral(name=_attr(element, "name"), instances=instances)


def build_instance(element: ET.Element) -> Instance:
    signals = tuple(
        build_signal(s)
        for group in _children(element, "instance", {"signals"})
        for s in group.findall("signal")
    )
    return Instance(name=_attr(element, "name"), signals=signals)


def build_signal(element: ET.Element) -> Signal:
    return Signal(
        pad=_attr(element, "pad"),
        group=element.get("group"),
        index=_opt_int(element, "index"),
    )


def build_address_space(element: ET.Element) -> AddressSpace:
    """
    Build an address space and its memory segments::

        <address-space endianness="little" name="signatures" id="signatures" start="0" size="3">
          <memory-segment start="0" size="3" type="signatures" rw="R" exec="0" name="SIGNATURES"/>
        </address-space>
    """
    segments = tuple(build_memory_segment(s) for s in element.findall("memory-segment"))
    return AddressSpace(
        id=_attr(element, "id"),
        name=_attr(element, "name"),
        start_address=_int(element, "start"),
        size=_int(element, "size"),
        segments=segments,
    )


def build_memory_segment(element: ET.Element) -> MemorySegment:
    readable, writable, executable = decode_permissions(element.get("rw"), element.get("exec"))
    return MemorySegment(
        start_address=_int(element, "start"),
        size=_int(element, "size"),
        type=_attr(element, "type"),
        readable=readable,
        writable=writable,
        executable=executable,
        name=_attr(element, "name"),
        page_size=_opt_int(element, "pagesize"),
    )


def build_interrupt(element: ET.Element) -> Interrupt:
    index = _int(element, "index")
    default_name = f"INT{index}"
    return Interrupt(
        name=element.get("name", default_name),
        caption=element.get("caption", default_name),
        index=index,
    )


def build_module(element: ET.Element) -> Module:
    register_groups: list[RegisterGroup] = []
    value_groups: list[ValueGroup] = []

    for child in _children(element, "module", {"register-group", "value-group"}):
        if child.tag == "register-group":
            register_groups.append(build_register_group(child))
        else:
            value_groups.append(build_value_group(child))

    return Module(
        name=_attr(element, "name"),
        register_groups=tuple(register_groups),
        value_groups=tuple(value_groups),
    )


def build_register_group(element: ET.Element) -> RegisterGroup:
    # Nested register-group elements (ATtiny816) are skipped.
    registers = tuple(build_register(r) for r in _children(element, "register-group", {"register"}))
    return RegisterGroup(
        name=_attr(element, "name"),
        caption=_attr(element, "caption"),
        registers=registers,
    )


def build_register(element: ET.Element) -> Register:
    """
    Build a register and its bitfields::

        <register caption="EEPROM Data Register" name="EEDR" offset="0x40" size="1" mask="0xFF" ocd-rw="R"/>

    ocd-rw "R" is read-only, "W" write-only, anything else (or absent) read-write.
    """
    size = _int(element, "size")
    bitfields = tuple(build_bitfield(b, size) for b in _children(element, "register", {"bitfield"}))
    return Register(
        name=_attr(element, "name"),
        caption=_attr(element, "caption"),
        offset=_int(element, "offset"),
        size=size,
        mask=_opt_int(element, "mask"),
        rw=_RW_MODES.get(element.get("ocd-rw", ""), ReadWrite.READ_WRITE),
        bitfields=bitfields,
    )


def build_bitfield(element: ET.Element, register_size: int) -> Bitfield:
    return Bitfield(
        name=_attr(element, "name"),
        caption=element.get("caption", ""),
        mask=_int(element, "mask"),
        size=register_size,
        values=element.get("values"),
    )


def build_value_group(element: ET.Element) -> ValueGroup:
    values = tuple(build_value(v) for v in _children(element, "value-group", {"value"}))
    return ValueGroup(
        name=_attr(element, "name"),
        caption=_attr(element, "caption"),
        values=values,
    )


def build_value(element: ET.Element) -> Value:
    return Value(
        name=_attr(element, "name"),
        caption=_attr(element, "caption"),
        value=_int(element, "value"),
    )
