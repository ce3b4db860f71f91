"""
Tests for the transition validator in isolation from the ledger view.
"""

import pytest

from vesting_lock.core.authorization import AuthorizationType
from vesting_lock.core.exceptions import AccountingError, ErrorCode, OutputShapeError, StructuralError
from vesting_lock.core.state_codec import VestingState
from vesting_lock.core.transition_validator import (
    OPERATION_VALIDATORS,
    Transition,
    TransitionValidator,
    implied_successor,
    validate_output_requirements,
    validate_single_input,
    validate_state_consistency,
)

CREATOR = AuthorizationType.CREATOR
BENEFICIARY = AuthorizationType.BENEFICIARY
NONE = AuthorizationType.NONE


def transition(auth, input_state, output_state=None, vested=5000):
    return Transition(auth, input_state, output_state, vested)


@pytest.fixture
def validator():
    return TransitionValidator()


class TestSingleInput:
    def test_one_input(self):
        validate_single_input(1)

    def test_many_inputs(self):
        with pytest.raises(OutputShapeError) as exc_info:
            validate_single_input(2)
        assert exc_info.value.code is ErrorCode.MULTIPLE_INPUTS_NOT_ALLOWED

    def test_no_input(self):
        with pytest.raises(StructuralError) as exc_info:
            validate_single_input(0)
        assert exc_info.value.code is ErrorCode.NO_MATCHING_INPUT_CELL


class TestOutputRequirements:
    @pytest.mark.parametrize(
        "auth,vested,has_output,input_state,expected",
        [
            (CREATOR, 0, True, VestingState(100, 0, 0, 0), ErrorCode.CREATOR_FULL_TERMINATION_HAS_OUTPUT),
            (CREATOR, 50, False, VestingState(100, 0, 0, 0), ErrorCode.CREATOR_OPERATION_MISSING_OUTPUT),
            (CREATOR, 100, True, VestingState(100, 0, 0, 0), ErrorCode.NOTHING_TO_TERMINATE),
            (CREATOR, 100, False, VestingState(100, 0, 0, 0), ErrorCode.NOTHING_TO_TERMINATE),
            (BENEFICIARY, 100, True, VestingState(100, 0, 0, 0), ErrorCode.BENEFICIARY_FULL_CLAIM_HAS_OUTPUT),
            (BENEFICIARY, 50, False, VestingState(100, 0, 0, 0), ErrorCode.BENEFICIARY_PARTIAL_CLAIM_MISSING_OUTPUT),
            (BENEFICIARY, 60, True, VestingState(100, 0, 40, 0), ErrorCode.BENEFICIARY_FULL_CLAIM_HAS_OUTPUT),
            (BENEFICIARY, 60, False, VestingState(100, 60, 40, 0), ErrorCode.INSUFFICIENT_VESTED),
            (NONE, 50, False, VestingState(100, 0, 0, 0), ErrorCode.ANONYMOUS_UPDATE_MISSING_OUTPUT),
        ],
    )
    def test_rejections(self, auth, vested, has_output, input_state, expected):
        output_state = input_state if has_output else None
        with pytest.raises((OutputShapeError, AccountingError)) as exc_info:
            validate_output_requirements(transition(auth, input_state, output_state, vested))
        assert exc_info.value.code is expected

    @pytest.mark.parametrize(
        "auth,vested,has_output,input_state",
        [
            (CREATOR, 0, False, VestingState(100, 0, 0, 0)),
            (CREATOR, 50, True, VestingState(100, 0, 0, 0)),
            (BENEFICIARY, 100, False, VestingState(100, 0, 0, 0)),
            (BENEFICIARY, 50, True, VestingState(100, 0, 0, 0)),
            (BENEFICIARY, 60, False, VestingState(100, 10, 40, 0)),
            (NONE, 0, True, VestingState(100, 0, 0, 0)),
            (NONE, 100, True, VestingState(100, 0, 0, 0)),
        ],
    )
    def test_accepted_shapes(self, auth, vested, has_output, input_state):
        output_state = input_state if has_output else None
        validate_output_requirements(transition(auth, input_state, output_state, vested))


class TestStateConsistency:
    def test_exact_deltas(self):
        validate_state_consistency(VestingState(100, 10, 0, 0), VestingState(100, 30, 0, 5), 20, 0)

    def test_total_changed_reported_first(self):
        with pytest.raises(AccountingError) as exc_info:
            validate_state_consistency(VestingState(100, 10, 0, 0), VestingState(99, 0, 7, 0), 0, 0)
        assert exc_info.value.code is ErrorCode.TOTAL_AMOUNT_CHANGED

    def test_beneficiary_delta(self):
        with pytest.raises(AccountingError) as exc_info:
            validate_state_consistency(VestingState(100, 10, 0, 0), VestingState(100, 11, 0, 0), 0, 0)
        assert exc_info.value.code is ErrorCode.INVALID_BENEFICIARY_CLAIMED_DELTA

    def test_creator_delta(self):
        with pytest.raises(AccountingError) as exc_info:
            validate_state_consistency(VestingState(100, 0, 0, 0), VestingState(100, 0, 5, 0), 0, 4)
        assert exc_info.value.code is ErrorCode.INVALID_CREATOR_CLAIMED_DELTA


class TestImpliedSuccessor:
    def test_creator_takes_unvested(self):
        successor = implied_successor(transition(CREATOR, VestingState(100, 0, 0, 7), vested=0))
        assert successor == VestingState(100, 0, 100, 7)

    def test_beneficiary_takes_available(self):
        successor = implied_successor(transition(BENEFICIARY, VestingState(100, 30, 0, 7), vested=100))
        assert successor == VestingState(100, 100, 0, 7)


class TestTransitionValidator:
    def test_creator_termination(self, validator):
        validator.validate(
            transition(CREATOR, VestingState(10_000, 0, 0, 10), VestingState(10_000, 0, 5000, 50))
        )

    def test_already_terminated(self, validator):
        with pytest.raises(AccountingError) as exc_info:
            validator.validate(
                transition(CREATOR, VestingState(10_000, 0, 5000, 10), VestingState(10_000, 0, 5000, 50))
            )
        assert exc_info.value.code is ErrorCode.ALREADY_TERMINATED

    def test_wrong_amount(self, validator):
        with pytest.raises(AccountingError) as exc_info:
            validator.validate(
                transition(CREATOR, VestingState(10_000, 0, 0, 10), VestingState(10_000, 0, 5001, 50))
            )
        assert exc_info.value.code is ErrorCode.INVALID_AMOUNT

    def test_beneficiary_claim(self, validator):
        validator.validate(
            transition(BENEFICIARY, VestingState(10_000, 1000, 0, 10), VestingState(10_000, 5000, 0, 50))
        )

    def test_beneficiary_over_claim(self, validator):
        with pytest.raises(AccountingError) as exc_info:
            validator.validate(
                transition(BENEFICIARY, VestingState(10_000, 1000, 0, 10), VestingState(10_000, 5001, 0, 50))
            )
        assert exc_info.value.code is ErrorCode.INSUFFICIENT_VESTED
        assert exc_info.value.details == {"claimed": 4001, "available": 4000}

    def test_anonymous_update(self, validator):
        validator.validate(transition(NONE, VestingState(10_000, 0, 0, 10), VestingState(10_000, 0, 0, 50)))

    def test_anonymous_state_change(self, validator):
        with pytest.raises(AccountingError) as exc_info:
            validator.validate(transition(NONE, VestingState(10_000, 0, 0, 10), VestingState(10_000, 0, 1, 50)))
        assert exc_info.value.code is ErrorCode.INVALID_STATE_CHANGE

    def test_dispatch_covers_every_authorization(self):
        assert set(OPERATION_VALIDATORS) == set(AuthorizationType)

    def test_custom_operation_table(self):
        calls = []
        table = dict(OPERATION_VALIDATORS)
        table[NONE] = lambda i, o, v: calls.append((i, o, v))
        before = VestingState(10_000, 0, 0, 10)
        after = VestingState(10_000, 0, 0, 50)
        TransitionValidator(table).validate(transition(NONE, before, after))
        assert calls == [(before, after, 5000)]

    def test_empty_operation_table_is_kept(self):
        validator = TransitionValidator({})
        assert validator.operation_validators == {}
        before = VestingState(10_000, 0, 0, 10)
        with pytest.raises(KeyError):
            validator.validate(transition(NONE, before, VestingState(10_000, 0, 0, 50)))
