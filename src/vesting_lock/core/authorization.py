"""
Authorization resolution using the proxy lock pattern.

The vesting lock does not verify signatures. A party is authorized when a
cell locked by its lock script is spent in the same transaction: the ledger
has already run that lock, so its presence among the inputs proves consent.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from vesting_lock.core.config_codec import VestingConfig


class AuthorizationType(Enum):
    CREATOR = "creator"
    BENEFICIARY = "beneficiary"
    NONE = "none"


def resolve_authorization(input_lock_hashes: Iterable[bytes], config: VestingConfig) -> AuthorizationType:
    """
    Classify the acting party from the lock hashes of every transaction input.

    The creator takes precedence when both parties' cells are spent together.
    """
    creator_authorized = False
    beneficiary_authorized = False
    for lock_hash in input_lock_hashes:
        if lock_hash == config.creator_lock_hash:
            creator_authorized = True
        elif lock_hash == config.beneficiary_lock_hash:
            beneficiary_authorized = True

    if creator_authorized:
        return AuthorizationType.CREATOR
    if beneficiary_authorized:
        return AuthorizationType.BENEFICIARY
    return AuthorizationType.NONE
