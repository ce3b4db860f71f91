"""
Vesting state codec.

Cell data holds the mutable accounting snapshot as four little-endian u64
words: ``total_amount | beneficiary_claimed | creator_claimed |
highest_block_seen``.
"""

from __future__ import annotations

from dataclasses import dataclass

from vesting_lock.core.constants import (
    BENEFICIARY_CLAIMED_OFFSET,
    CREATOR_CLAIMED_OFFSET,
    DATA_LEN,
    HIGHEST_BLOCK_SEEN_OFFSET,
    TOTAL_AMOUNT_OFFSET,
)
from vesting_lock.core.exceptions import ErrorCode, StructuralError
from vesting_lock.core.units import pack_u64, read_u64


@dataclass(frozen=True)
class VestingState:
    total_amount: int
    beneficiary_claimed: int
    creator_claimed: int
    highest_block_seen: int

    @property
    def is_terminated(self) -> bool:
        return self.creator_claimed > 0

    def encode(self) -> bytes:
        return encode_vesting_data(
            self.total_amount,
            self.beneficiary_claimed,
            self.creator_claimed,
            self.highest_block_seen,
        )


def parse_vesting_state(data: bytes, length_error: ErrorCode = ErrorCode.WRONG_DATA_LENGTH) -> VestingState:
    """Parse cell data, raising ``length_error`` when it is not exactly 32 bytes."""
    if len(data) != DATA_LEN:
        raise StructuralError(
            length_error,
            f"cell data must be {DATA_LEN} bytes, got {len(data)}",
            {"length": len(data)},
        )
    return VestingState(
        total_amount=read_u64(data, TOTAL_AMOUNT_OFFSET),
        beneficiary_claimed=read_u64(data, BENEFICIARY_CLAIMED_OFFSET),
        creator_claimed=read_u64(data, CREATOR_CLAIMED_OFFSET),
        highest_block_seen=read_u64(data, HIGHEST_BLOCK_SEEN_OFFSET),
    )


def encode_vesting_data(
    total_amount: int,
    beneficiary_claimed: int,
    creator_claimed: int,
    highest_block_seen: int,
) -> bytes:
    return (
        pack_u64(total_amount)
        + pack_u64(beneficiary_claimed)
        + pack_u64(creator_claimed)
        + pack_u64(highest_block_seen)
    )
