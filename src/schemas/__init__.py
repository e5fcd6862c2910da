from .vault_state import LockedProfitTracker, VaultState
from .valuation import ValuationResult
