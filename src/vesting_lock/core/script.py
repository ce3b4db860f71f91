"""
Lock script identity.

A cell's lock is a script: the code it runs (``code_hash`` + ``hash_type``)
and its ``args``. Cells are grouped by the hash of their lock script, so two
vesting cells share an identity exactly when their code and args (the
vesting configuration) are byte-identical.

The hash is BLAKE2b-256 with the ledger's default personalization over the
molecule serialization of the script table.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass
from typing import Any, Dict, List

from vesting_lock.core.constants import HASH_PERSONALIZATION, HASH_SIZE, HASH_TYPES
from vesting_lock.core.units import format_hex, parse_hex

_U32 = struct.Struct("<I")


def blake2b_256(data: bytes) -> bytes:
    """Ledger default hash: BLAKE2b with a 32-byte digest and fixed personalization."""
    return hashlib.blake2b(data, digest_size=HASH_SIZE, person=HASH_PERSONALIZATION).digest()


def _serialize_table(fields: List[bytes]) -> bytes:
    """Molecule table: total size, one offset per field, then the fields."""
    header_size = _U32.size * (len(fields) + 1)
    offsets = []
    cursor = header_size
    for field in fields:
        offsets.append(cursor)
        cursor += len(field)
    header = _U32.pack(cursor) + b"".join(_U32.pack(offset) for offset in offsets)
    return header + b"".join(fields)


def _serialize_fixvec(items: bytes) -> bytes:
    return _U32.pack(len(items)) + items


@dataclass(frozen=True)
class Script:
    """A lock script reference: code identity plus arguments."""

    code_hash: bytes
    hash_type: str
    args: bytes = b""

    def __post_init__(self) -> None:
        if len(self.code_hash) != HASH_SIZE:
            raise ValueError(f"code_hash must be {HASH_SIZE} bytes, got {len(self.code_hash)}")
        if self.hash_type not in HASH_TYPES:
            raise ValueError(f"Unknown hash_type {self.hash_type!r}")
        object.__setattr__(self, "code_hash", bytes(self.code_hash))
        object.__setattr__(self, "args", bytes(self.args))

    def serialize(self) -> bytes:
        return _serialize_table(
            [
                self.code_hash,
                bytes([HASH_TYPES[self.hash_type]]),
                _serialize_fixvec(self.args),
            ]
        )

    def hash(self) -> bytes:
        """Lock hash identifying every cell locked by this script."""
        return blake2b_256(self.serialize())

    def with_args(self, args: bytes) -> "Script":
        return Script(self.code_hash, self.hash_type, args)

    def same_code(self, other: "Script") -> bool:
        return self.code_hash == other.code_hash and self.hash_type == other.hash_type

    def to_dict(self) -> Dict[str, str]:
        return {
            "code_hash": format_hex(self.code_hash),
            "hash_type": self.hash_type,
            "args": format_hex(self.args),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Script":
        try:
            return cls(
                code_hash=parse_hex(data["code_hash"], "code_hash"),
                hash_type=str(data.get("hash_type", "data1")),
                args=parse_hex(data.get("args", "0x"), "args"),
            )
        except KeyError as exc:
            raise ValueError(f"Script is missing required field {exc}") from exc
