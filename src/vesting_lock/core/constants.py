"""
Vesting Lock Constants

Byte layouts of the lock script args and cell data, integer bounds and the
hashing parameters used to derive lock hashes.

NOTE: The layouts below are part of the on-chain format (marked with
[CONSENSUS]). Changing them invalidates every existing vesting cell.
"""

from typing import Final

# =============================================================================
# INTEGER BOUNDS
# =============================================================================

U64_MAX: Final[int] = (1 << 64) - 1
U64_SIZE: Final[int] = 8
HASH_SIZE: Final[int] = 32

# =============================================================================
# LOCK ARGS LAYOUT [CONSENSUS - DO NOT CHANGE]
# =============================================================================

# creator_lock_hash[32] | beneficiary_lock_hash[32] | start | end | cliff
CREATOR_LOCK_HASH_OFFSET: Final[int] = 0
BENEFICIARY_LOCK_HASH_OFFSET: Final[int] = 32
START_EPOCH_OFFSET: Final[int] = 64
END_EPOCH_OFFSET: Final[int] = 72
CLIFF_EPOCH_OFFSET: Final[int] = 80
ARGS_LEN: Final[int] = 88

# =============================================================================
# CELL DATA LAYOUT [CONSENSUS - DO NOT CHANGE]
# =============================================================================

TOTAL_AMOUNT_OFFSET: Final[int] = 0
BENEFICIARY_CLAIMED_OFFSET: Final[int] = 8
CREATOR_CLAIMED_OFFSET: Final[int] = 16
HIGHEST_BLOCK_SEEN_OFFSET: Final[int] = 24
DATA_LEN: Final[int] = 32

# =============================================================================
# SCRIPT HASHING
# =============================================================================

# BLAKE2b-256 personalization used for script hashes (exactly 16 bytes)
HASH_PERSONALIZATION: Final[bytes] = b"ckb-default-hash"

HASH_TYPE_DATA: Final[int] = 0
HASH_TYPE_TYPE: Final[int] = 1
HASH_TYPE_DATA1: Final[int] = 2
HASH_TYPE_DATA2: Final[int] = 4

HASH_TYPES: Final[dict] = {
    "data": HASH_TYPE_DATA,
    "type": HASH_TYPE_TYPE,
    "data1": HASH_TYPE_DATA1,
    "data2": HASH_TYPE_DATA2,
}

# Placeholder code hash for locally built vesting scripts when no deployment
# code hash is configured
DEFAULT_VESTING_CODE_HASH: Final[str] = "0x" + "76" * 32

# =============================================================================
# RESULT PROTOCOL
# =============================================================================

SUCCESS: Final[int] = 0
