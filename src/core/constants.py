import hashlib

from core.config import settings

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

# Fixed-point scale for locked profit degradation, set by the vault program
LOCKED_PROFIT_DEGRADATION_DENOMINATOR = 1_000_000_000_000

MAX_STRATEGY = 30
PUBKEY_LENGTH = 32
DISCRIMINATOR_LENGTH = 8

# Anchor account discriminator: first 8 bytes of sha256("account:<Name>")
VAULT_DISCRIMINATOR = hashlib.sha256(b"account:Vault").digest()[:DISCRIMINATOR_LENGTH]

ZERO_PUBKEY = "11111111111111111111111111111111"

VAULT_PROGRAM_ID = "24Uqj9JCLxUeoC3hGfh5W3s9FM9uCHDS2SG3LYwBpyTi"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

MSOL_VAULT_ADDRESS = "8p1VKP45hhqq5iZG5fNGoi7ucme8nFLeChoDWNy7rWFm"

NETWORK_RPC_URLS = {
    "mainnet": settings.SOLANA_RPC_URL,
    "devnet": settings.SOLANA_DEVNET_RPC_URL,
}
