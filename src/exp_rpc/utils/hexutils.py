"""Hex and number conversion helpers.

Protocol quantities are ``0x``-prefixed hex strings that routinely exceed
the 53-bit range of a double, so everything here works on Python ``int``.
Floats are accepted only when they hold an integral value.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..errors import FormatterRejected

_HEX_RE = re.compile(r"^-?0x[0-9a-fA-F]*$")
_DECIMAL_RE = re.compile(r"^-?[0-9]+$")
_STRICT_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_ADDRESS_RE = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")


def is_hex_string(value: Any) -> bool:
    """True for ``0x``-prefixed (optionally negative) hex strings."""
    return isinstance(value, str) and bool(_HEX_RE.match(value))


def is_strict_address(value: Any) -> bool:
    """True for a ``0x``-prefixed 20-byte hex address."""
    return isinstance(value, str) and bool(_STRICT_ADDRESS_RE.match(value))


def is_address(value: Any) -> bool:
    """True for a 20-byte hex address with or without the ``0x`` prefix."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def to_big_number(value: Any) -> int:
    """Convert a hex string, decimal string or number to an ``int``.

    Raises:
        FormatterRejected: If the value is not a number or numeric string,
            or is a float with a fractional part.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise FormatterRejected(f"Refusing to truncate non-integral {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _HEX_RE.match(text):
            negative = text.startswith("-")
            digits = text[3:] if negative else text[2:]
            number = int(digits or "0", 16)
            return -number if negative else number
        if _DECIMAL_RE.match(text):
            return int(text)
    raise FormatterRejected(f"Cannot convert {value!r} to a number")


def to_decimal(value: Any) -> int:
    """Decode a protocol quantity into an ``int``."""
    return to_big_number(value)


def from_decimal(value: Any) -> str:
    """Encode a number (or numeric string) as a protocol hex quantity."""
    number = to_big_number(value)
    if number < 0:
        return f"-0x{-number:x}"
    return f"0x{number:x}"


def from_utf8(text: str) -> str:
    """Hex-encode the UTF-8 bytes of a string."""
    return "0x" + text.encode("utf-8").hex()


def to_hex(value: Any) -> str:
    """Auto-convert a value to its hex representation.

    Booleans and numbers become quantities, hex strings pass through,
    decimal strings are parsed, other strings and JSON-able containers are
    encoded byte-wise.
    """
    if value is None:
        raise FormatterRejected("Cannot hex-encode None")
    if isinstance(value, (bool, int, float)):
        return from_decimal(value)
    if isinstance(value, (dict, list)):
        return from_utf8(json.dumps(value, separators=(",", ":")))
    if isinstance(value, str):
        if _HEX_RE.match(value):
            return value if value.startswith("0x") else from_decimal(value)
        if _DECIMAL_RE.match(value):
            return from_decimal(value)
        return from_utf8(value)
    raise FormatterRejected(f"Cannot hex-encode {type(value).__name__}")
