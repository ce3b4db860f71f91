"""
Vesting Lock - Script Entry Point

Runs the vesting lock for one script group and maps the verdict to the
host's result protocol: 0 for success, otherwise the ``ErrorCode`` of the
first rule that failed.

Also provides the group runner that verifies every vesting lock spent by a
transaction, the way the ledger runs each lock once per group of inputs
sharing it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from vesting_lock.core.authorization import AuthorizationType
from vesting_lock.core.config import Config
from vesting_lock.core.config_codec import parse_vesting_config
from vesting_lock.core.constants import SUCCESS
from vesting_lock.core.exceptions import ErrorCode, VestingLockError, get_error_context
from vesting_lock.core.script import Script
from vesting_lock.core.state_codec import VestingState, parse_vesting_state
from vesting_lock.core.summary import summarize_inputs
from vesting_lock.core.temporal_guard import (
    collect_header_context,
    validate_header_freshness,
    validate_highest_block_update,
)
from vesting_lock.core.transaction import Source, Transaction, TransactionView, group_lock_scripts
from vesting_lock.core.transition_validator import Transition, TransitionValidator, validate_single_input
from vesting_lock.core.units import format_hex, parse_hex
from vesting_lock.core.vesting_calculator import vested_for

logger = logging.getLogger(__name__)


def find_matching_output_state(
    view: TransactionView,
    script_hash: bytes,
    authorization: AuthorizationType = AuthorizationType.NONE,
) -> Optional[VestingState]:
    """
    Successor state from the first output carrying the active lock, if any.

    A wrong-length successor is reported as WRONG_DATA_LENGTH when the
    beneficiary is acting and as OUTPUT_DATA_WRONG_LENGTH otherwise.
    """
    length_error = (
        ErrorCode.WRONG_DATA_LENGTH
        if authorization is AuthorizationType.BENEFICIARY
        else ErrorCode.OUTPUT_DATA_WRONG_LENGTH
    )
    for index, lock_hash in view.query_indexed(view.load_cell_lock_hash, Source.OUTPUT):
        if lock_hash == script_hash:
            data = view.load_cell_data(index, Source.OUTPUT)
            return parse_vesting_state(data, length_error)
    return None


def verify_vesting_lock(view: TransactionView, validator: Optional[TransitionValidator] = None) -> Transition:
    """
    Validate the spend of the active vesting cell.

    Returns the accepted transition; raises ``VestingLockError`` on the first
    violated rule.
    """
    script = view.load_script()
    config = parse_vesting_config(script.args)
    script_hash = script.hash()

    summary = summarize_inputs(view, script_hash, config)
    validate_single_input(summary.matching_input_count)
    input_state = parse_vesting_state(summary.matching_input_data[0], ErrorCode.WRONG_DATA_LENGTH)

    context = collect_header_context(view, summary.max_input_watermark)
    validate_header_freshness(context)

    vested_amount = vested_for(config, input_state, context.current_epoch)

    output_state = find_matching_output_state(view, script_hash, summary.authorization)
    if output_state is not None:
        validate_highest_block_update(input_state, output_state, context)

    transition = Transition(
        authorization=summary.authorization,
        input_state=input_state,
        output_state=output_state,
        vested_amount=vested_amount,
    )
    (validator or TransitionValidator()).validate(transition)
    return transition


def program_entry(view: TransactionView) -> int:
    """Run the lock script and return its result code."""
    lock_hash = format_hex(view.load_script().hash())
    try:
        transition = verify_vesting_lock(view)
    except VestingLockError as exc:
        logger.warning(
            "Vesting lock rejected transaction: %s",
            exc,
            extra={"lock_hash": lock_hash, **get_error_context(exc)},
        )
        return int(exc.code)

    logger.debug(
        "Vesting lock accepted %s transition",
        transition.authorization.value,
        extra={
            "lock_hash": lock_hash,
            "vested_amount": transition.vested_amount,
            "consumed": not transition.has_output,
        },
    )
    return SUCCESS


# ==================== Script Groups ====================


def build_vesting_script(args: bytes, config: Optional[Config] = None) -> Script:
    """Lock script running the vesting code with ``args`` as its configuration."""
    config = config or Config()
    return Script(
        code_hash=parse_hex(config.VESTING_CODE_HASH, "code_hash"),
        hash_type=config.VESTING_HASH_TYPE,
        args=args,
    )


@dataclass(frozen=True)
class GroupResult:
    script: Script
    code: int

    @property
    def lock_hash(self) -> str:
        return format_hex(self.script.hash())

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS

    @property
    def error_name(self) -> Optional[str]:
        if self.ok:
            return None
        return ErrorCode(self.code).name


@dataclass(frozen=True)
class TransactionVerdict:
    results: Tuple[GroupResult, ...]

    @property
    def code(self) -> int:
        """First failing group's code, or 0 when every group passed."""
        for result in self.results:
            if not result.ok:
                return result.code
        return SUCCESS

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS


def verify_transaction(transaction: Transaction, config: Optional[Config] = None) -> TransactionVerdict:
    """
    Run the vesting lock once for every distinct vesting lock among the inputs.

    Inputs locked by other scripts (for example the proxy locks that
    authorize a party) are left to their own scripts.
    """
    config = config or Config()
    template = build_vesting_script(b"", config)

    results: List[GroupResult] = []
    for script in group_lock_scripts(transaction):
        if not script.same_code(template):
            continue
        code = program_entry(TransactionView(transaction, script))
        results.append(GroupResult(script=script, code=code))

    verdict = TransactionVerdict(results=tuple(results))
    logger.info(
        "Verified %d vesting group(s)",
        len(results),
        extra={"code": verdict.code, "groups": [r.lock_hash for r in results]},
    )
    return verdict
