import logging
from typing import Callable, Optional

import pendulum

from core.constants import LOCKED_PROFIT_DEGRADATION_DENOMINATOR
from schemas import ValuationResult, VaultState
from utils.calculate_amount import compute_underlying_share, compute_withdrawable
from utils.vault_layout import decode_vault_state

logger = logging.getLogger(__name__)


def utc_timestamp() -> int:
    return pendulum.now(tz=pendulum.UTC).int_timestamp


def value_decoded_position(
    state: VaultState,
    total_supply: int,
    user_balance: int,
    *,
    now: int,
    denominator: int = LOCKED_PROFIT_DEGRADATION_DENOMINATOR,
) -> ValuationResult:
    withdrawable_amount = compute_withdrawable(state, now, denominator=denominator)
    underlying_share = compute_underlying_share(
        withdrawable_amount, total_supply, user_balance
    )
    logger.debug(
        "Valued position at %s: withdrawable=%s share=%s",
        now,
        withdrawable_amount,
        underlying_share,
    )
    return ValuationResult(
        withdrawable_amount=withdrawable_amount,
        underlying_share=underlying_share,
        timestamp=now,
    )


def value_position(
    account_data: bytes,
    total_supply: int,
    user_balance: int,
    *,
    clock: Optional[Callable[[], int]] = None,
    denominator: int = LOCKED_PROFIT_DEGRADATION_DENOMINATOR,
) -> ValuationResult:
    """
    Value a depositor's LP balance in underlying token units.

    ``clock`` is sampled once; the same timestamp is used for the whole
    valuation and returned on the result.
    """
    now = (clock or utc_timestamp)()
    state = decode_vault_state(account_data)
    return value_decoded_position(
        state, total_supply, user_balance, now=now, denominator=denominator
    )
