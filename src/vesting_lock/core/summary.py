"""
Single-pass transaction summary.

Cardinality, authorization and the input watermark all depend on the same
sweep over the transaction inputs. The sweep runs once and its result is an
immutable value handed to the validator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from vesting_lock.core.authorization import AuthorizationType, resolve_authorization
from vesting_lock.core.config_codec import VestingConfig
from vesting_lock.core.exceptions import ErrorCode
from vesting_lock.core.state_codec import parse_vesting_state
from vesting_lock.core.transaction import Source, TransactionView


@dataclass(frozen=True)
class TransactionSummary:
    matching_input_count: int
    authorization: AuthorizationType
    matching_input_data: Tuple[bytes, ...]

    @property
    def max_input_watermark(self) -> int:
        """Highest ``highest_block_seen`` among inputs sharing the active lock."""
        highest = 0
        for data in self.matching_input_data:
            state = parse_vesting_state(data, ErrorCode.INPUT_DATA_WRONG_LENGTH)
            if state.highest_block_seen > highest:
                highest = state.highest_block_seen
        return highest


def summarize_inputs(view: TransactionView, script_hash: bytes, config: VestingConfig) -> TransactionSummary:
    lock_hashes: List[bytes] = []
    matching_data: List[bytes] = []
    for index, lock_hash in view.query_indexed(view.load_cell_lock_hash, Source.INPUT):
        lock_hashes.append(lock_hash)
        if lock_hash == script_hash:
            matching_data.append(view.load_cell_data(index, Source.INPUT))

    return TransactionSummary(
        matching_input_count=len(matching_data),
        authorization=resolve_authorization(lock_hashes, config),
        matching_input_data=tuple(matching_data),
    )
