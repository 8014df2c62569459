"""Decode ATDF attribute text: decimal or 0x-hex integers, voltages, and rw/exec permissions."""

import re

from .errors import InvalidLiteralError

_HEX_PREFIX = "0x"

# ASCII digits only; no whitespace, underscores or signs after "0x".
_DECIMAL = re.compile(r"-?[0-9]+")
_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")
_DECIMAL_FRACTION = re.compile(r"-?[0-9]+(\.[0-9]+)?")


def decode_int(text: str | None, *, attribute: str | None = None, element: str | None = None) -> int:
    """
    Decode an integer literal.

    - Text starting with "0x" is parsed as base 16 (remainder only).
    - Anything else must be a plain, optionally negative, decimal.

    Raises InvalidLiteralError when text is absent or not such a literal.
    """
    if text is None:
        raise InvalidLiteralError(None, attribute=attribute, element=element)
    if text.startswith(_HEX_PREFIX):
        digits = text[len(_HEX_PREFIX):]
        if _HEX_DIGITS.fullmatch(digits):
            return int(digits, 16)
    elif _DECIMAL.fullmatch(text):
        return int(text, 10)
    raise InvalidLiteralError(text, attribute=attribute, element=element)


def decode_optional_int(
    text: str | None, *, attribute: str | None = None, element: str | None = None
) -> int | None:
    """Like decode_int, but absent text decodes to None."""
    if text is None:
        return None
    return decode_int(text, attribute=attribute, element=element)


def decode_float(text: str | None, *, attribute: str | None = None, element: str | None = None) -> float:
    """Decode a decimal number such as a supply voltage ("1.8")."""
    if text is None or not _DECIMAL_FRACTION.fullmatch(text):
        raise InvalidLiteralError(text, attribute=attribute, element=element)
    return float(text)


def decode_permissions(rw: str | None, exec_: str | None) -> tuple[bool, bool, bool]:
    """
    Return (readable, writable, executable) for a memory segment.

    Absent rw/exec text counts as the empty string, i.e. no permission.
    """
    rw = rw or ""
    exec_ = exec_ or ""
    readable = "r" in rw or "R" in rw
    writable = "w" in rw or "W" in rw
    executable = exec_ == "1"
    return readable, writable, executable
