"""Tests for the data model: register union and name lookups."""

import dataclasses

import pytest

from pyavr_mcu import union
from pyavr_mcu.types import (
    Architecture,
    Bitfield,
    Device,
    Mcu,
    Module,
    Peripheral,
    ReadWrite,
    Register,
    RegisterGroup,
    ValueGroup,
)


def _reg(name: str = "EEAR", mask: int | None = None, **kwargs) -> Register:
    return Register(name=name, caption="EEPROM Address Register", offset=0x41, size=2, mask=mask, **kwargs)


def test_union_adopts_mask_when_left_has_none() -> None:
    result = union(_reg(mask=None), _reg(mask=0x0F))
    assert result.mask == 0x0F


def test_union_keeps_left_mask_when_specific() -> None:
    result = union(_reg(mask=0xFF), _reg(mask=0x0F))
    assert result.mask == 0xFF


def test_union_both_absent() -> None:
    assert union(_reg(), _reg()).mask is None


def test_union_only_merges_mask() -> None:
    a = _reg(mask=None)
    b = dataclasses.replace(
        _reg(mask=0x03FF),
        caption="other",
        rw=ReadWrite.READ_ONLY,
        bitfields=(Bitfield("EEAR0", "", 0x01, 2),),
    )
    result = a.union(b)
    assert result == dataclasses.replace(a, mask=0x03FF)
    assert result.rw is ReadWrite.READ_WRITE
    assert result.bitfields == ()


def test_union_different_names_raises() -> None:
    with pytest.raises(ValueError, match="same register"):
        union(_reg("EEAR"), _reg("EEDR"))


def test_union_does_not_mutate_inputs() -> None:
    a = _reg(mask=None)
    a.union(_reg(mask=0x0F))
    assert a.mask is None


def test_register_bit_width_and_bitfield_lookup() -> None:
    reg = _reg(bitfields=(Bitfield("EEAR8", "", 0x100, 2),))
    assert reg.bit_width == 16
    assert reg.bitfield("EEAR8") is not None
    assert reg.bitfield("missing") is None


def test_entities_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        _reg().name = "OTHER"  # type: ignore[misc]


def test_mcu_lookups_return_none_when_absent() -> None:
    reg = _reg(mask=0x3FF)
    module = Module(
        name="EEPROM",
        register_groups=(RegisterGroup("EEPROM", "EEPROM", (reg,)),),
        value_groups=(ValueGroup("EEP_MODE", ""),),
    )
    mcu = Mcu(
        device=Device(name="ATmega328P", peripherals=(Peripheral("PORT"),)),
        variants=(),
        modules=(module,),
        architecture=Architecture.AVR5,
        c_preprocessor_name="__AVR_ATmega328P__",
    )
    assert mcu.name == "ATmega328P"
    assert mcu.peripheral("PORT") == Peripheral("PORT")
    assert mcu.peripheral("port") is None
    assert mcu.module("EEPROM") is module
    assert mcu.module("USART") is None
    assert module.register_group("EEPROM").register("EEAR") is reg
    assert module.value_group("EEP_MODE") is not None
    assert module.value_group("nope") is None
    assert list(mcu.registers()) == [reg]
