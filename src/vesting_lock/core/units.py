"""
Unsigned 64-bit integer helpers.

Amounts, epochs and block numbers are u64 on chain. Python integers are
unbounded, so these helpers reproduce the saturating and checked arithmetic
the lock script relies on and pack/unpack little-endian words.
"""

from __future__ import annotations

import struct
from typing import Any, Optional

from vesting_lock.core.constants import U64_MAX, U64_SIZE

_U64 = struct.Struct("<Q")


def to_u64(value: Any, field: str = "value") -> int:
    """Validate that ``value`` is an integer in the u64 range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field} must be an integer, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{field} out of u64 range: {value}")
    return value


def saturating_sub(a: int, b: int) -> int:
    return a - b if a > b else 0


def saturating_add(a: int, b: int) -> int:
    return min(a + b, U64_MAX)


def checked_mul(a: int, b: int) -> Optional[int]:
    """Multiply two u64 values, returning None when the product overflows."""
    product = a * b
    if product > U64_MAX:
        return None
    return product


def read_u64(buf: bytes, offset: int) -> int:
    """Read a little-endian u64 at ``offset``."""
    return _U64.unpack_from(buf, offset)[0]


def pack_u64(value: int) -> bytes:
    return _U64.pack(to_u64(value))


def parse_hex(value: str, field: str = "value") -> bytes:
    """Decode a hex string with or without a ``0x`` prefix."""
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a hex string")
    text = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"{field} is not valid hex: {value!r}") from exc


def format_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


__all__ = [
    "U64_SIZE",
    "checked_mul",
    "format_hex",
    "pack_u64",
    "parse_hex",
    "read_u64",
    "saturating_add",
    "saturating_sub",
    "to_u64",
]
