"""
Linear vesting with a cliff.

Nothing vests before the cliff; from the cliff on, the vested share grows
linearly from ``start_epoch`` and reaches the full amount at ``end_epoch``.
After a creator termination the schedule no longer applies and everything
the creator did not take back is vested.
"""

from __future__ import annotations

import logging

from vesting_lock.core.config_codec import VestingConfig
from vesting_lock.core.state_codec import VestingState
from vesting_lock.core.units import checked_mul, saturating_sub

logger = logging.getLogger(__name__)


def calculate_vested_amount(
    current_epoch: int,
    start_epoch: int,
    end_epoch: int,
    cliff_epoch: int,
    total_amount: int,
    creator_claimed: int,
) -> int:
    """
    Calculate the amount vested at ``current_epoch``.

    Non-decreasing in ``current_epoch``. If ``elapsed * total_amount`` does
    not fit in a u64 the whole amount is treated as vested.
    """
    # Post-termination: everything not taken by the creator is vested
    if creator_claimed > 0:
        return saturating_sub(total_amount, creator_claimed)

    if current_epoch < start_epoch:
        return 0

    # Degenerate schedule, rejected when the config is parsed
    if start_epoch >= end_epoch:
        return total_amount

    effective_cliff = min(cliff_epoch, end_epoch)
    if current_epoch < effective_cliff:
        return 0

    if current_epoch >= end_epoch:
        return total_amount

    elapsed = current_epoch - start_epoch
    duration = end_epoch - start_epoch

    product = checked_mul(elapsed, total_amount)
    if product is None:
        logger.debug(
            "Vesting product overflows u64, treating as fully vested",
            extra={"elapsed": elapsed, "total_amount": total_amount},
        )
        return total_amount
    return product // duration


def vested_for(config: VestingConfig, state: VestingState, current_epoch: int) -> int:
    """Vested amount of ``state`` under ``config`` at ``current_epoch``."""
    return calculate_vested_amount(
        current_epoch,
        config.start_epoch,
        config.end_epoch,
        config.cliff_epoch,
        state.total_amount,
        state.creator_claimed,
    )
