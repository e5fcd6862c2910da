from typing import Annotated, Tuple

import base58
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from core.constants import MAX_STRATEGY, PUBKEY_LENGTH, U64_MAX, ZERO_PUBKEY


def _validate_pubkey(v: str) -> str:
    try:
        raw = base58.b58decode(v)
    except ValueError as e:
        raise ValueError(f"Invalid base58 public key: {v}") from e
    if len(raw) != PUBKEY_LENGTH:
        raise ValueError(f"Public key must be {PUBKEY_LENGTH} bytes, got {len(raw)}")
    return v


U8 = Annotated[int, Field(ge=0, le=255, strict=True)]
U64 = Annotated[int, Field(ge=0, le=U64_MAX, strict=True)]
Pubkey = Annotated[str, AfterValidator(_validate_pubkey)]


class LockedProfitTracker(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_updated_locked_profit: U64 = 0
    last_report: U64 = 0
    locked_profit_degradation: U64 = 0

    @property
    def locked_profit_at_report(self) -> int:
        return self.last_updated_locked_profit

    @property
    def last_report_time(self) -> int:
        return self.last_report

    @property
    def degradation_rate(self) -> int:
        return self.locked_profit_degradation


class VaultState(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: U8 = 1
    vault_bump: U8 = 0
    token_vault_bump: U8 = 0
    total_amount: U64 = 0
    token_vault: Pubkey = ZERO_PUBKEY
    fee_vault: Pubkey = ZERO_PUBKEY
    token_mint: Pubkey = ZERO_PUBKEY
    lp_mint: Pubkey = ZERO_PUBKEY
    strategies: Tuple[Pubkey, ...] = (ZERO_PUBKEY,) * MAX_STRATEGY
    base: Pubkey = ZERO_PUBKEY
    admin: Pubkey = ZERO_PUBKEY
    operator: Pubkey = ZERO_PUBKEY
    locked_profit_tracker: LockedProfitTracker = LockedProfitTracker()

    @field_validator("strategies")
    def check_strategy_slots(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(v) != MAX_STRATEGY:
            raise ValueError(f"Expected {MAX_STRATEGY} strategy slots, got {len(v)}")
        return v

    @property
    def underlying_mint_id(self) -> str:
        return self.token_mint

    @property
    def lp_mint_id(self) -> str:
        return self.lp_mint

    @property
    def is_enabled(self) -> bool:
        return self.enabled == 1

    @property
    def active_strategies(self) -> Tuple[str, ...]:
        return tuple(s for s in self.strategies if s != ZERO_PUBKEY)
