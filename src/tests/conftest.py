import pytest

from core import constants
from schemas import LockedProfitTracker, VaultState
from utils.vault_layout import encode_vault_state

MSOL_MINT = "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So"
LP_MINT = "21bR3D4QR4GzopVco44PVMBXwHFpSYrbrdeNwdKk7umb"
WALLET = "5ZTBXQRpKa7TUVeYgC8tXVEFiMaTe77nR1aJcBRdF1Vz"
STRATEGY = "So11111111111111111111111111111111111111112"


def make_state(
    total_amount=1_000_000,
    last_report=1000,
    degradation=1,
    locked_profit=500_000,
    **kwargs,
) -> VaultState:
    return VaultState(
        total_amount=total_amount,
        locked_profit_tracker=LockedProfitTracker(
            last_updated_locked_profit=locked_profit,
            last_report=last_report,
            locked_profit_degradation=degradation,
        ),
        **kwargs,
    )


@pytest.fixture
def vault_state() -> VaultState:
    strategies = (STRATEGY,) + (constants.ZERO_PUBKEY,) * (constants.MAX_STRATEGY - 1)
    return make_state(
        enabled=1,
        vault_bump=254,
        token_vault_bump=253,
        token_mint=MSOL_MINT,
        lp_mint=LP_MINT,
        token_vault=constants.TOKEN_PROGRAM_ID,
        fee_vault=WALLET,
        strategies=strategies,
        base=constants.MSOL_VAULT_ADDRESS,
        admin=WALLET,
        operator=WALLET,
    )


@pytest.fixture
def vault_account_data(vault_state) -> bytes:
    # real vault accounts carry unused space after the encoded fields
    return encode_vault_state(vault_state) + bytes(512)


@pytest.fixture
def state_factory():
    return make_state
