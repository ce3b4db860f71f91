"""
Tests for the error taxonomy.
"""

import pytest

from vesting_lock.core.exceptions import (
    AccountingError,
    ErrorCode,
    IndexOutOfBound,
    OutputShapeError,
    ScheduleError,
    StructuralError,
    TemporalError,
    VestingLockError,
    error_for_code,
    get_error_context,
)


WIRE_VALUES = {
    "INDEX_OUT_OF_BOUND": 1,
    "ITEM_MISSING": 2,
    "LENGTH_NOT_ENOUGH": 3,
    "INVALID_DATA": 4,
    "INVALID_ARGS": 10,
    "INVALID_WITNESS": 11,
    "INVALID_TRANSACTION": 12,
    "INVALID_TRANSACTION_STRUCTURE": 13,
    "TOTAL_AMOUNT_CHANGED": 14,
    "INVALID_BENEFICIARY_CLAIMED_DELTA": 15,
    "INVALID_CREATOR_CLAIMED_DELTA": 16,
    "INVALID_STATE_CHANGE": 17,
    "INVALID_AMOUNT": 20,
    "INSUFFICIENT_VESTED": 21,
    "ALREADY_TERMINATED": 22,
    "INVALID_EPOCH": 23,
    "STALE_HEADER": 24,
    "UNAUTHORIZED": 25,
    "BLOCK_NUMBER_DECREASE": 26,
    "BLOCK_NUMBER_MISMATCH": 27,
    "INVALID_CELL_DATA": 30,
    "LOAD_CELL_DATA_FAILED": 31,
    "WRONG_DATA_LENGTH": 32,
    "NO_MATCHING_INPUT_CELL": 33,
    "NO_MATCHING_OUTPUT_CELL": 34,
    "NO_HEADER_DEPENDENCIES": 35,
    "MULTIPLE_INPUTS_NOT_ALLOWED": 36,
    "CREATOR_OPERATION_MISSING_OUTPUT": 37,
    "ANONYMOUS_UPDATE_MISSING_OUTPUT": 38,
    "INPUT_DATA_WRONG_LENGTH": 39,
    "OUTPUT_DATA_WRONG_LENGTH": 40,
    "CREATOR_FULL_TERMINATION_HAS_OUTPUT": 41,
    "BENEFICIARY_FULL_CLAIM_HAS_OUTPUT": 42,
    "BENEFICIARY_PARTIAL_CLAIM_MISSING_OUTPUT": 43,
    "NOTHING_TO_TERMINATE": 44,
}


def test_wire_values_are_stable():
    assert {code.name: int(code) for code in ErrorCode} == WIRE_VALUES


def test_every_code_has_a_category():
    for code in ErrorCode:
        assert issubclass(error_for_code(code), VestingLockError)


@pytest.mark.parametrize(
    "code,category",
    [
        (ErrorCode.INDEX_OUT_OF_BOUND, IndexOutOfBound),
        (ErrorCode.INVALID_ARGS, StructuralError),
        (ErrorCode.INVALID_EPOCH, ScheduleError),
        (ErrorCode.STALE_HEADER, TemporalError),
        (ErrorCode.INSUFFICIENT_VESTED, AccountingError),
        (ErrorCode.MULTIPLE_INPUTS_NOT_ALLOWED, OutputShapeError),
    ],
)
def test_categories(code, category):
    assert error_for_code(code) is category
    assert error_for_code(int(code)) is category


class TestVestingLockError:
    def test_defaults(self):
        exc = TemporalError()
        assert exc.code is ErrorCode.STALE_HEADER
        assert exc.message == "stale header"
        assert exc.details == {}
        assert exc.recoverable is False

    def test_str_includes_code(self):
        exc = AccountingError(ErrorCode.INVALID_AMOUNT, "bad amount")
        assert str(exc) == "INVALID_AMOUNT (20): bad amount"

    def test_code_coerced_from_int(self):
        assert StructuralError(32).code is ErrorCode.WRONG_DATA_LENGTH

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError):
            StructuralError(99)

    def test_schedule_error_is_structural(self):
        with pytest.raises(StructuralError):
            raise ScheduleError()


class TestErrorContext:
    def test_vesting_error(self):
        exc = TemporalError(ErrorCode.BLOCK_NUMBER_MISMATCH, "mismatch", {"expected": 5})
        context = get_error_context(exc)
        assert context == {
            "error_type": "TemporalError",
            "error_message": "BLOCK_NUMBER_MISMATCH (27): mismatch",
            "error_code": 27,
            "error_name": "BLOCK_NUMBER_MISMATCH",
            "recoverable": False,
            "details": {"expected": 5},
        }

    def test_plain_exception(self):
        context = get_error_context(ValueError("boom"))
        assert context == {"error_type": "ValueError", "error_message": "boom"}
