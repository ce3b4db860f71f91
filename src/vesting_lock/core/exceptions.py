"""
Vesting lock exception hierarchy.

Every rejection the lock script can produce is a typed exception carrying the
wire-level ``ErrorCode``. Exceptions are grouped by category so callers can
catch a whole class of failures, while ``program_entry`` maps the carried
code to the integer the host expects.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional, Type


class ErrorCode(IntEnum):
    """Result codes returned by the lock script. Values are part of the host protocol."""

    # Ledger query failures
    INDEX_OUT_OF_BOUND = 1
    ITEM_MISSING = 2
    LENGTH_NOT_ENOUGH = 3
    INVALID_DATA = 4

    # Script-specific errors
    INVALID_ARGS = 10
    INVALID_WITNESS = 11
    INVALID_TRANSACTION = 12
    INVALID_TRANSACTION_STRUCTURE = 13
    TOTAL_AMOUNT_CHANGED = 14
    INVALID_BENEFICIARY_CLAIMED_DELTA = 15
    INVALID_CREATOR_CLAIMED_DELTA = 16
    INVALID_STATE_CHANGE = 17

    # Vesting logic errors
    INVALID_AMOUNT = 20
    INSUFFICIENT_VESTED = 21
    ALREADY_TERMINATED = 22
    INVALID_EPOCH = 23
    STALE_HEADER = 24
    UNAUTHORIZED = 25
    BLOCK_NUMBER_DECREASE = 26
    BLOCK_NUMBER_MISMATCH = 27

    # Encoding errors
    INVALID_CELL_DATA = 30  # Deprecated, kept for wire compatibility
    LOAD_CELL_DATA_FAILED = 31
    WRONG_DATA_LENGTH = 32
    NO_MATCHING_INPUT_CELL = 33
    NO_MATCHING_OUTPUT_CELL = 34
    NO_HEADER_DEPENDENCIES = 35

    # Transaction structure errors
    MULTIPLE_INPUTS_NOT_ALLOWED = 36
    CREATOR_OPERATION_MISSING_OUTPUT = 37
    ANONYMOUS_UPDATE_MISSING_OUTPUT = 38
    INPUT_DATA_WRONG_LENGTH = 39
    OUTPUT_DATA_WRONG_LENGTH = 40
    CREATOR_FULL_TERMINATION_HAS_OUTPUT = 41
    BENEFICIARY_FULL_CLAIM_HAS_OUTPUT = 42
    BENEFICIARY_PARTIAL_CLAIM_MISSING_OUTPUT = 43
    NOTHING_TO_TERMINATE = 44


class VestingLockError(Exception):
    """Base exception for every vesting lock rejection.

    Attributes:
        code: Wire-level result code
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether retrying the same input can succeed (never, the
            computation is deterministic)
    """

    recoverable = False
    default_code = ErrorCode.INVALID_TRANSACTION

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code = ErrorCode(code if code is not None else self.default_code)
        self.message = message or self.code.name.replace("_", " ").lower()
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.name} ({int(self.code)}): {self.message}"


# ==================== Ledger Errors ====================


class LedgerError(VestingLockError):
    """Raised when the ledger query interface cannot serve a request.

    Index exhaustion is the normal end-of-list signal for sweeps; it only
    surfaces as a result code when a required item is missing.
    """

    default_code = ErrorCode.INDEX_OUT_OF_BOUND


class IndexOutOfBound(LedgerError):
    """Raised when a cell or header index is past the end of its list."""

    default_code = ErrorCode.INDEX_OUT_OF_BOUND


class ItemMissing(LedgerError):
    """Raised when a requested item exists in the index space but has no value."""

    default_code = ErrorCode.ITEM_MISSING


# ==================== Structural Errors ====================


class StructuralError(VestingLockError):
    """Raised when args, cell data or the transaction shape is malformed.

    Examples: wrong byte lengths, missing matching cells, no header deps.
    """

    default_code = ErrorCode.INVALID_TRANSACTION_STRUCTURE


class ScheduleError(StructuralError):
    """Raised when the vesting schedule violates start < end, start <= cliff <= end."""

    default_code = ErrorCode.INVALID_EPOCH


# ==================== Temporal Errors ====================


class TemporalError(VestingLockError):
    """Raised when header freshness or the block watermark is violated."""

    default_code = ErrorCode.STALE_HEADER


# ==================== Accounting Errors ====================


class AccountingError(VestingLockError):
    """Raised when claimed amounts or totals do not follow the vesting rules."""

    default_code = ErrorCode.INVALID_AMOUNT


# ==================== Output Shape Errors ====================


class OutputShapeError(VestingLockError):
    """Raised when cell cardinality or output presence does not fit the operation."""

    default_code = ErrorCode.INVALID_TRANSACTION_STRUCTURE


_CATEGORY_BY_CODE: Dict[ErrorCode, Type[VestingLockError]] = {
    ErrorCode.INDEX_OUT_OF_BOUND: IndexOutOfBound,
    ErrorCode.ITEM_MISSING: ItemMissing,
    ErrorCode.LENGTH_NOT_ENOUGH: LedgerError,
    ErrorCode.INVALID_DATA: LedgerError,
    ErrorCode.INVALID_ARGS: StructuralError,
    ErrorCode.INVALID_WITNESS: StructuralError,
    ErrorCode.INVALID_TRANSACTION: StructuralError,
    ErrorCode.INVALID_TRANSACTION_STRUCTURE: StructuralError,
    ErrorCode.TOTAL_AMOUNT_CHANGED: AccountingError,
    ErrorCode.INVALID_BENEFICIARY_CLAIMED_DELTA: AccountingError,
    ErrorCode.INVALID_CREATOR_CLAIMED_DELTA: AccountingError,
    ErrorCode.INVALID_STATE_CHANGE: AccountingError,
    ErrorCode.INVALID_AMOUNT: AccountingError,
    ErrorCode.INSUFFICIENT_VESTED: AccountingError,
    ErrorCode.ALREADY_TERMINATED: AccountingError,
    ErrorCode.INVALID_EPOCH: ScheduleError,
    ErrorCode.STALE_HEADER: TemporalError,
    ErrorCode.UNAUTHORIZED: VestingLockError,
    ErrorCode.BLOCK_NUMBER_DECREASE: TemporalError,
    ErrorCode.BLOCK_NUMBER_MISMATCH: TemporalError,
    ErrorCode.INVALID_CELL_DATA: StructuralError,
    ErrorCode.LOAD_CELL_DATA_FAILED: StructuralError,
    ErrorCode.WRONG_DATA_LENGTH: StructuralError,
    ErrorCode.NO_MATCHING_INPUT_CELL: StructuralError,
    ErrorCode.NO_MATCHING_OUTPUT_CELL: StructuralError,
    ErrorCode.NO_HEADER_DEPENDENCIES: StructuralError,
    ErrorCode.MULTIPLE_INPUTS_NOT_ALLOWED: OutputShapeError,
    ErrorCode.CREATOR_OPERATION_MISSING_OUTPUT: OutputShapeError,
    ErrorCode.ANONYMOUS_UPDATE_MISSING_OUTPUT: OutputShapeError,
    ErrorCode.INPUT_DATA_WRONG_LENGTH: StructuralError,
    ErrorCode.OUTPUT_DATA_WRONG_LENGTH: StructuralError,
    ErrorCode.CREATOR_FULL_TERMINATION_HAS_OUTPUT: OutputShapeError,
    ErrorCode.BENEFICIARY_FULL_CLAIM_HAS_OUTPUT: OutputShapeError,
    ErrorCode.BENEFICIARY_PARTIAL_CLAIM_MISSING_OUTPUT: OutputShapeError,
    ErrorCode.NOTHING_TO_TERMINATE: AccountingError,
}


# ==================== Utility Functions ====================


def error_for_code(code: ErrorCode) -> Type[VestingLockError]:
    """Return the exception category raised for a result code."""
    return _CATEGORY_BY_CODE[ErrorCode(code)]


def get_error_context(exc: Exception) -> Dict[str, Any]:
    """Extract error context from an exception for logging.

    Args:
        exc: The exception to extract context from

    Returns:
        Dictionary containing error type, message, and any additional details
    """
    context: Dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, VestingLockError):
        context["error_code"] = int(exc.code)
        context["error_name"] = exc.code.name
        context["recoverable"] = exc.recoverable
        if exc.details:
            context["details"] = exc.details

    return context
