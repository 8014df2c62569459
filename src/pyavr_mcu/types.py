"""Core data model: Mcu, Device, Variant, memory map, peripherals, modules and registers."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator


class Architecture(str, Enum):
    """AVR instruction-set families (GCC -mmcu architectures); Unknown is a valid classification."""

    UNKNOWN = "unknown"
    AVR0 = "avr0"
    AVR1 = "avr1"
    AVR2 = "avr2"
    AVR25 = "avr25"
    AVR3 = "avr3"
    AVR31 = "avr31"
    AVR35 = "avr35"
    AVR4 = "avr4"
    AVR5 = "avr5"
    AVR51 = "avr51"
    AVR6 = "avr6"
    XMEGA2 = "xmega2"
    XMEGA3 = "xmega3"
    XMEGA4 = "xmega4"
    XMEGA5 = "xmega5"
    XMEGA6 = "xmega6"
    XMEGA7 = "xmega7"
    TINY = "tiny"


class ReadWrite(str, Enum):
    """Access mode of a register, from the ocd-rw attribute."""

    READ_WRITE = "read-write"
    READ_ONLY = "read-only"
    WRITE_ONLY = "write-only"


@dataclass(frozen=True)
class ArchInfo:
    """Result of arch.lookup(name): architecture and C preprocessor name, not read from packs."""

    architecture: Architecture
    c_preprocessor_name: str


@dataclass(frozen=True)
class Signal:
    """Pin-level exposure of a peripheral instance."""

    pad: str
    group: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class Instance:
    name: str
    signals: tuple[Signal, ...] = ()


@dataclass(frozen=True)
class Peripheral:
    name: str
    instances: tuple[Instance, ...] = ()


@dataclass(frozen=True)
class MemorySegment:
    start_address: int
    size: int
    type: str
    readable: bool
    writable: bool
    executable: bool
    name: str
    page_size: int | None = None


@dataclass(frozen=True)
class AddressSpace:
    id: str
    name: str
    start_address: int
    size: int
    segments: tuple[MemorySegment, ...] = ()


@dataclass(frozen=True)
class Interrupt:
    name: str
    caption: str
    index: int


@dataclass(frozen=True)
class Device:
    """The chip itself, independent of packaging variant."""

    name: str
    address_spaces: tuple[AddressSpace, ...] = ()
    peripherals: tuple[Peripheral, ...] = ()
    interrupts: tuple[Interrupt, ...] = ()

    def peripheral(self, name: str) -> Peripheral | None:
        return next((p for p in self.peripherals if p.name == name), None)


@dataclass(frozen=True)
class Variant:
    """A packaged, temperature/voltage/speed graded instance of a device."""

    name: str
    package: str
    temperature_min: int
    temperature_max: int
    voltage_min: float
    voltage_max: float
    speed_max_hz: int
    pinout: str | None = None


@dataclass(frozen=True)
class Value:
    name: str
    caption: str
    value: int


@dataclass(frozen=True)
class ValueGroup:
    name: str
    caption: str
    values: tuple[Value, ...] = ()


@dataclass(frozen=True)
class Bitfield:
    """Named sub-range of a register; size is the parent register's size in bytes."""

    name: str
    caption: str
    mask: int
    size: int
    values: str | None = None  # name of a ValueGroup in the same module, unresolved


@dataclass(frozen=True)
class Register:
    name: str
    caption: str
    offset: int
    size: int  # bytes
    mask: int | None = None
    rw: ReadWrite = ReadWrite.READ_WRITE
    bitfields: tuple[Bitfield, ...] = ()

    @property
    def bit_width(self) -> int:
        return self.size * 8

    def bitfield(self, name: str) -> Bitfield | None:
        return next((b for b in self.bitfields if b.name == name), None)

    def union(self, other: "Register") -> "Register":
        """
        Combine two descriptions of the same register.

        The result is a copy of self; if self has no mask and other does, the
        result takes other's mask. Only the mask is merged.

        Raises ValueError when the register names differ.
        """
        if self.name != other.name:
            raise ValueError(
                f"can only take the union between descriptions of the same register, "
                f"got {self.name!r} and {other.name!r}"
            )
        if self.mask is None and other.mask is not None:
            return replace(self, mask=other.mask)
        return replace(self)


def union(a: Register, b: Register) -> Register:
    """Module-level form of Register.union."""
    return a.union(b)


@dataclass(frozen=True)
class RegisterGroup:
    name: str
    caption: str
    registers: tuple[Register, ...] = ()

    def register(self, name: str) -> Register | None:
        return next((r for r in self.registers if r.name == name), None)


@dataclass(frozen=True)
class Module:
    """Silicon block exposing registers, e.g. USART."""

    name: str
    register_groups: tuple[RegisterGroup, ...] = ()
    value_groups: tuple[ValueGroup, ...] = ()

    def register_group(self, name: str) -> RegisterGroup | None:
        return next((g for g in self.register_groups if g.name == name), None)

    def value_group(self, name: str) -> ValueGroup | None:
        return next((g for g in self.value_groups if g.name == name), None)


@dataclass(frozen=True)
class Mcu:
    """One microcontroller: the unit returned by the loader and the catalog."""

    device: Device
    variants: tuple[Variant, ...]
    modules: tuple[Module, ...]
    architecture: Architecture
    c_preprocessor_name: str

    @property
    def name(self) -> str:
        return self.device.name

    def peripheral(self, name: str) -> Peripheral | None:
        """Return the peripheral with this exact name, or None."""
        return self.device.peripheral(name)

    def module(self, name: str) -> Module | None:
        """Return the module with this exact name, or None."""
        return next((m for m in self.modules if m.name == name), None)

    def register_groups(self) -> Iterator[RegisterGroup]:
        for module in self.modules:
            yield from module.register_groups

    def registers(self) -> Iterator[Register]:
        for group in self.register_groups():
            yield from group.registers
