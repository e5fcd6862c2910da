from pydantic import BaseModel, ConfigDict

from .vault_state import U64


class ValuationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    withdrawable_amount: U64
    underlying_share: U64
    # the single clock sample the valuation was computed at
    timestamp: U64
