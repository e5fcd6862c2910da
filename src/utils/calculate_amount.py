import logging
import warnings

from core.constants import LOCKED_PROFIT_DEGRADATION_DENOMINATOR
from core.errors import ArithmeticOverflowError, ClockSkewError, InvariantWarning
from schemas.vault_state import VaultState
from utils.checked_math import (
    checked_div,
    checked_mul_u128,
    checked_sub_u128,
    checked_sub_u64,
    ensure_u64,
    to_u64,
)

logger = logging.getLogger(__name__)


def compute_locked_profit(
    state: VaultState,
    now: int,
    *,
    denominator: int = LOCKED_PROFIT_DEGRADATION_DENOMINATOR,
) -> int:
    """
    Profit still locked at ``now``.

    The profit reported at ``last_report`` unlocks linearly at
    ``locked_profit_degradation / denominator`` per second. Once the elapsed
    ratio exceeds the denominator nothing is locked any more.
    """
    tracker = state.locked_profit_tracker
    now = ensure_u64(now, "now")
    if denominator <= 0:
        raise ArithmeticOverflowError(
            f"Degradation denominator must be positive, got {denominator}"
        )
    if now < tracker.last_report:
        raise ClockSkewError(now, tracker.last_report)

    duration = now - tracker.last_report
    locked_fund_ratio = checked_mul_u128(duration, tracker.locked_profit_degradation)
    if locked_fund_ratio > denominator:
        logger.debug(
            "Locked profit fully released: ratio %s > %s", locked_fund_ratio, denominator
        )
        return 0

    remaining = checked_div(
        checked_mul_u128(
            tracker.last_updated_locked_profit,
            checked_sub_u128(denominator, locked_fund_ratio),
        ),
        denominator,
    )
    return to_u64(remaining)


def compute_withdrawable(
    state: VaultState,
    now: int,
    *,
    denominator: int = LOCKED_PROFIT_DEGRADATION_DENOMINATOR,
) -> int:
    """Vault total minus the profit still locked at ``now``."""
    locked_profit = compute_locked_profit(state, now, denominator=denominator)
    if locked_profit == 0:
        return state.total_amount
    return checked_sub_u64(state.total_amount, locked_profit)


def compute_underlying_share(
    withdrawable: int, total_supply: int, user_balance: int
) -> int:
    # convert LP balance into underlying token amount
    withdrawable = ensure_u64(withdrawable, "withdrawable")
    total_supply = ensure_u64(total_supply, "total_supply")
    user_balance = ensure_u64(user_balance, "user_balance")

    if total_supply == 0:
        return 0

    if user_balance > total_supply:
        message = f"User balance {user_balance} exceeds LP supply {total_supply}"
        logger.warning(message)
        warnings.warn(message, InvariantWarning, stacklevel=2)

    return to_u64(
        checked_div(checked_mul_u128(user_balance, withdrawable), total_supply)
    )
