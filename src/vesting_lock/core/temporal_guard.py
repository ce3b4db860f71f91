"""
Header freshness and block watermark checks.

Every vesting cell records the highest block number it has observed. Header
dependencies supplied with a transaction must be strictly newer than that
watermark, and a continuing cell must advance the watermark to exactly the
freshest header. Together these stop an old header from being replayed to
claim against a stale epoch.
"""

from __future__ import annotations

from dataclasses import dataclass

from vesting_lock.core.exceptions import ErrorCode, StructuralError, TemporalError
from vesting_lock.core.state_codec import VestingState
from vesting_lock.core.transaction import Source, TransactionView


@dataclass(frozen=True)
class TemporalContext:
    highest_block_from_inputs: int
    highest_block_from_headers: int
    highest_epoch_from_headers: int

    @property
    def current_epoch(self) -> int:
        """Epoch used for vesting math."""
        return self.highest_epoch_from_headers


def collect_header_context(view: TransactionView, highest_block_from_inputs: int) -> TemporalContext:
    """
    Scan header dependencies for the freshest block number and epoch.

    Raises:
        StructuralError: the transaction declares no header dependency
    """
    highest_block = 0
    highest_epoch = 0
    seen_any = False
    for header in view.query_iter(view.load_header, Source.HEADER_DEP):
        seen_any = True
        if header.number > highest_block:
            highest_block = header.number
        if header.epoch > highest_epoch:
            highest_epoch = header.epoch

    if not seen_any:
        raise StructuralError(ErrorCode.NO_HEADER_DEPENDENCIES, "at least one header dependency is required")

    return TemporalContext(
        highest_block_from_inputs=highest_block_from_inputs,
        highest_block_from_headers=highest_block,
        highest_epoch_from_headers=highest_epoch,
    )


def validate_header_freshness(context: TemporalContext) -> None:
    """Headers must be strictly newer than any watermark already recorded."""
    if context.highest_block_from_headers <= context.highest_block_from_inputs:
        raise TemporalError(
            ErrorCode.STALE_HEADER,
            "header dependencies are not newer than the recorded watermark",
            {
                "highest_block_from_headers": context.highest_block_from_headers,
                "highest_block_from_inputs": context.highest_block_from_inputs,
            },
        )


def validate_highest_block_update(
    input_state: VestingState,
    output_state: VestingState,
    context: TemporalContext,
) -> None:
    """The successor watermark never decreases and equals the freshest header."""
    if output_state.highest_block_seen < input_state.highest_block_seen:
        raise TemporalError(
            ErrorCode.BLOCK_NUMBER_DECREASE,
            "highest_block_seen decreased",
            {
                "input": input_state.highest_block_seen,
                "output": output_state.highest_block_seen,
            },
        )
    if output_state.highest_block_seen != context.highest_block_from_headers:
        raise TemporalError(
            ErrorCode.BLOCK_NUMBER_MISMATCH,
            "highest_block_seen must equal the freshest header block number",
            {
                "output": output_state.highest_block_seen,
                "expected": context.highest_block_from_headers,
            },
        )
