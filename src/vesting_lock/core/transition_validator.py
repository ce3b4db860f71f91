"""
Vesting Lock - Transition Validator

Decides whether the before/after accounting state of a vesting cell is one
of the three legal operations:

- Creator termination: the creator takes back the whole unvested remainder,
  once
- Beneficiary claim: the beneficiary takes at most what has vested
- Anonymous update: anyone advances the block watermark, nothing else

The operation is fixed by the authorization determined up front; there is no
path from one operation's rules to another's.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from vesting_lock.core.authorization import AuthorizationType
from vesting_lock.core.exceptions import AccountingError, ErrorCode, OutputShapeError, StructuralError
from vesting_lock.core.state_codec import VestingState
from vesting_lock.core.units import saturating_add, saturating_sub


@dataclass(frozen=True)
class Transition:
    """Everything the validator needs about one spend of a vesting cell."""

    authorization: AuthorizationType
    input_state: VestingState
    output_state: Optional[VestingState]
    vested_amount: int

    @property
    def has_output(self) -> bool:
        return self.output_state is not None


def validate_single_input(matching_input_count: int) -> None:
    """Exactly one input may carry this vesting lock; batching is not supported."""
    if matching_input_count > 1:
        raise OutputShapeError(
            ErrorCode.MULTIPLE_INPUTS_NOT_ALLOWED,
            "only one vesting cell per configuration may be spent in a transaction",
            {"matching_inputs": matching_input_count},
        )
    if matching_input_count == 0:
        raise StructuralError(ErrorCode.NO_MATCHING_INPUT_CELL, "no input carries this vesting lock")


def validate_output_requirements(transition: Transition) -> None:
    """Check that the successor cell is present exactly when the operation continues the cell."""
    auth = transition.authorization
    state = transition.input_state
    vested = transition.vested_amount
    total = state.total_amount
    has_output = transition.has_output

    if auth is AuthorizationType.CREATOR:
        if vested == 0:
            if has_output:
                raise OutputShapeError(
                    ErrorCode.CREATOR_FULL_TERMINATION_HAS_OUTPUT,
                    "nothing has vested, the creator must consume the cell",
                )
        elif vested < total:
            if not has_output:
                raise OutputShapeError(
                    ErrorCode.CREATOR_OPERATION_MISSING_OUTPUT,
                    "the vested part must continue for the beneficiary",
                )
        else:
            raise AccountingError(ErrorCode.NOTHING_TO_TERMINATE, "everything has already vested")

    elif auth is AuthorizationType.BENEFICIARY:
        if state.is_terminated:
            remaining = saturating_sub(saturating_sub(total, state.creator_claimed), state.beneficiary_claimed)
            if remaining == 0:
                raise AccountingError(ErrorCode.INSUFFICIENT_VESTED, "nothing left to claim after termination")
            if has_output:
                raise OutputShapeError(
                    ErrorCode.BENEFICIARY_FULL_CLAIM_HAS_OUTPUT,
                    "after termination the beneficiary must sweep the cell",
                )
        elif vested >= total:
            if has_output:
                raise OutputShapeError(
                    ErrorCode.BENEFICIARY_FULL_CLAIM_HAS_OUTPUT,
                    "fully vested cells must be consumed",
                )
        elif not has_output:
            raise OutputShapeError(
                ErrorCode.BENEFICIARY_PARTIAL_CLAIM_MISSING_OUTPUT,
                "a partial claim must continue the cell",
            )

    elif not has_output:
        raise OutputShapeError(
            ErrorCode.ANONYMOUS_UPDATE_MISSING_OUTPUT,
            "unauthorized transactions may only update the cell",
        )


def validate_state_consistency(
    input_state: VestingState,
    output_state: VestingState,
    beneficiary_claimed_delta: int,
    creator_claimed_delta: int,
) -> None:
    if output_state.total_amount != input_state.total_amount:
        raise AccountingError(
            ErrorCode.TOTAL_AMOUNT_CHANGED,
            "total_amount is immutable",
            {"input": input_state.total_amount, "output": output_state.total_amount},
        )
    if output_state.beneficiary_claimed != saturating_add(input_state.beneficiary_claimed, beneficiary_claimed_delta):
        raise AccountingError(
            ErrorCode.INVALID_BENEFICIARY_CLAIMED_DELTA,
            "beneficiary_claimed does not match the claimed amount",
            {"expected_delta": beneficiary_claimed_delta},
        )
    if output_state.creator_claimed != saturating_add(input_state.creator_claimed, creator_claimed_delta):
        raise AccountingError(
            ErrorCode.INVALID_CREATOR_CLAIMED_DELTA,
            "creator_claimed does not match the terminated amount",
            {"expected_delta": creator_claimed_delta},
        )


def implied_successor(transition: Transition) -> VestingState:
    """
    Virtual successor for a fully consumed cell.

    The consuming party takes everything it is entitled to: the beneficiary
    all available vested tokens, the creator the whole unvested remainder.
    """
    state = transition.input_state
    if transition.authorization is AuthorizationType.CREATOR:
        unvested = saturating_sub(state.total_amount, transition.vested_amount)
        return VestingState(
            total_amount=state.total_amount,
            beneficiary_claimed=state.beneficiary_claimed,
            creator_claimed=saturating_add(state.creator_claimed, unvested),
            highest_block_seen=state.highest_block_seen,
        )
    available = saturating_sub(transition.vested_amount, state.beneficiary_claimed)
    return VestingState(
        total_amount=state.total_amount,
        beneficiary_claimed=saturating_add(state.beneficiary_claimed, available),
        creator_claimed=state.creator_claimed,
        highest_block_seen=state.highest_block_seen,
    )


def validate_creator_termination(input_state: VestingState, output_state: VestingState, vested_amount: int) -> None:
    """All-or-nothing, one-shot reclaim of the unvested remainder."""
    if input_state.is_terminated:
        raise AccountingError(ErrorCode.ALREADY_TERMINATED, "the vesting was already terminated")

    unvested = saturating_sub(input_state.total_amount, vested_amount)
    creator_claimed = saturating_sub(output_state.creator_claimed, input_state.creator_claimed)
    if creator_claimed != unvested:
        raise AccountingError(
            ErrorCode.INVALID_AMOUNT,
            "the creator must take exactly the unvested amount",
            {"claimed": creator_claimed, "unvested": unvested},
        )

    validate_state_consistency(input_state, output_state, 0, creator_claimed)


def validate_beneficiary_claim(input_state: VestingState, output_state: VestingState, vested_amount: int) -> None:
    available = saturating_sub(vested_amount, input_state.beneficiary_claimed)
    claimed = saturating_sub(output_state.beneficiary_claimed, input_state.beneficiary_claimed)
    if claimed > available:
        raise AccountingError(
            ErrorCode.INSUFFICIENT_VESTED,
            "claim exceeds the vested amount",
            {"claimed": claimed, "available": available},
        )

    validate_state_consistency(input_state, output_state, claimed, 0)


def validate_block_update_only(input_state: VestingState, output_state: VestingState, vested_amount: int) -> None:
    """Only ``highest_block_seen`` may change."""
    if (
        output_state.total_amount != input_state.total_amount
        or output_state.beneficiary_claimed != input_state.beneficiary_claimed
        or output_state.creator_claimed != input_state.creator_claimed
    ):
        raise AccountingError(
            ErrorCode.INVALID_STATE_CHANGE,
            "an unauthorized update may only advance highest_block_seen",
        )


OperationValidator = Callable[[VestingState, VestingState, int], None]

OPERATION_VALIDATORS: Dict[AuthorizationType, OperationValidator] = {
    AuthorizationType.CREATOR: validate_creator_termination,
    AuthorizationType.BENEFICIARY: validate_beneficiary_claim,
    AuthorizationType.NONE: validate_block_update_only,
}


class TransitionValidator:
    """
    Applies the output-shape policy and then the accounting rules of the
    operation selected by the authorization.

    Raises the first violated rule as a ``VestingLockError``.
    """

    def __init__(self, operation_validators: Optional[Dict[AuthorizationType, OperationValidator]] = None):
        if operation_validators is None:
            operation_validators = OPERATION_VALIDATORS
        self.operation_validators = operation_validators

    def validate(self, transition: Transition) -> None:
        validate_output_requirements(transition)

        successor = transition.output_state
        if successor is None:
            successor = implied_successor(transition)

        operation = self.operation_validators[transition.authorization]
        operation(transition.input_state, successor, transition.vested_amount)
