import logging
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    SOLANA_RPC_URL: str = "https://api.mainnet-beta.solana.com"
    SOLANA_DEVNET_RPC_URL: str = "https://api.devnet.solana.com"
    SOLANA_COMMITMENT: str = "confirmed"
    RPC_TIMEOUT_SECONDS: float = 30

    # Meteora mSOL vault and the wallet queried by the share report
    VAULT_ADDRESS: str = "8p1VKP45hhqq5iZG5fNGoi7ucme8nFLeChoDWNy7rWFm"
    WALLET_ADDRESS: str = "5ZTBXQRpKa7TUVeYgC8tXVEFiMaTe77nR1aJcBRdF1Vz"

    LOG_LEVEL: str = "INFO"

    # Seq log
    SEQ_SERVER_URL: Optional[str] = None
    SEQ_SERVER_API_KEY: Optional[str] = None

    @field_validator("SOLANA_COMMITMENT")
    def validate_commitment(cls, v: str) -> str:
        if v not in ("processed", "confirmed", "finalized"):
            raise ValueError(f"Unsupported commitment: {v}")
        return v

    @field_validator("LOG_LEVEL")
    def normalize_log_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v

    class Config:

        case_sensitive = True
        env_file = "../.env"
        extra = "allow"


settings = Settings()
