"""
Vesting configuration codec.

The configuration lives in the lock script args as a fixed 88-byte block:
``creator_lock_hash[32] | beneficiary_lock_hash[32] | start_epoch | end_epoch
| cliff_epoch`` with little-endian u64 epochs.
"""

from __future__ import annotations

from dataclasses import dataclass

from vesting_lock.core.constants import (
    ARGS_LEN,
    BENEFICIARY_LOCK_HASH_OFFSET,
    CLIFF_EPOCH_OFFSET,
    CREATOR_LOCK_HASH_OFFSET,
    END_EPOCH_OFFSET,
    HASH_SIZE,
    START_EPOCH_OFFSET,
)
from vesting_lock.core.exceptions import ErrorCode, ScheduleError, StructuralError
from vesting_lock.core.units import pack_u64, read_u64, to_u64


@dataclass(frozen=True)
class VestingConfig:
    creator_lock_hash: bytes
    beneficiary_lock_hash: bytes
    start_epoch: int
    end_epoch: int
    cliff_epoch: int

    def is_schedule_valid(self) -> bool:
        return (
            self.start_epoch < self.end_epoch
            and self.start_epoch <= self.cliff_epoch <= self.end_epoch
        )


def parse_vesting_config(args: bytes) -> VestingConfig:
    """
    Parse and validate the vesting configuration from script args.

    Raises:
        StructuralError: args are not exactly 88 bytes (InvalidArgs)
        ScheduleError: epochs violate start < end, start <= cliff <= end (InvalidEpoch)
    """
    if len(args) != ARGS_LEN:
        raise StructuralError(
            ErrorCode.INVALID_ARGS,
            f"lock args must be {ARGS_LEN} bytes, got {len(args)}",
            {"length": len(args)},
        )

    config = VestingConfig(
        creator_lock_hash=bytes(args[CREATOR_LOCK_HASH_OFFSET:CREATOR_LOCK_HASH_OFFSET + HASH_SIZE]),
        beneficiary_lock_hash=bytes(args[BENEFICIARY_LOCK_HASH_OFFSET:BENEFICIARY_LOCK_HASH_OFFSET + HASH_SIZE]),
        start_epoch=read_u64(args, START_EPOCH_OFFSET),
        end_epoch=read_u64(args, END_EPOCH_OFFSET),
        cliff_epoch=read_u64(args, CLIFF_EPOCH_OFFSET),
    )

    if not config.is_schedule_valid():
        raise ScheduleError(
            ErrorCode.INVALID_EPOCH,
            "epochs must satisfy start < end and start <= cliff <= end",
            {
                "start_epoch": config.start_epoch,
                "end_epoch": config.end_epoch,
                "cliff_epoch": config.cliff_epoch,
            },
        )
    return config


def encode_vesting_args(
    creator_lock_hash: bytes,
    beneficiary_lock_hash: bytes,
    start_epoch: int,
    end_epoch: int,
    cliff_epoch: int,
) -> bytes:
    """Pack a configuration into the 88-byte args layout. The schedule is not validated."""
    for name, value in (("creator_lock_hash", creator_lock_hash), ("beneficiary_lock_hash", beneficiary_lock_hash)):
        if len(value) != HASH_SIZE:
            raise ValueError(f"{name} must be {HASH_SIZE} bytes, got {len(value)}")
    return (
        bytes(creator_lock_hash)
        + bytes(beneficiary_lock_hash)
        + pack_u64(to_u64(start_epoch, "start_epoch"))
        + pack_u64(to_u64(end_epoch, "end_epoch"))
        + pack_u64(to_u64(cliff_epoch, "cliff_epoch"))
    )


def encode_config(config: VestingConfig) -> bytes:
    return encode_vesting_args(
        config.creator_lock_hash,
        config.beneficiary_lock_hash,
        config.start_epoch,
        config.end_epoch,
        config.cliff_epoch,
    )
