import base64
import itertools
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import requests

from core.config import settings

logger = logging.getLogger(__name__)


class RpcError(Exception):
    """
    Raised when a ledger read fails or returns an unusable payload.
    """


class AccountNotFoundError(RpcError):
    """
    Raised when the requested account does not exist.
    """


def parse_amount(value: Any, what: str) -> int:
    # token amounts come back as base-unit decimal strings
    try:
        amount = int(value)
    except (TypeError, ValueError) as e:
        raise RpcError(f"Cannot parse {what} amount {value!r}") from e
    if amount < 0:
        raise RpcError(f"Negative {what} amount {amount}")
    return amount


@contextmanager
def malformed_payload(method: str):
    # binascii.Error from base64 decoding is a ValueError
    try:
        yield
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise RpcError(f"{method} returned a malformed payload: {e!r}") from e


class SolanaRpcClient:
    def __init__(
        self,
        endpoint: str = settings.SOLANA_RPC_URL,
        commitment: str = settings.SOLANA_COMMITMENT,
        timeout: float = settings.RPC_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.commitment = commitment
        self.timeout = timeout
        self.session = session or requests.Session()
        self._ids = itertools.count(1)

    def call(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        headers = {"Content-Type": "application/json"}
        try:
            response = self.session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise RpcError(f"{method} request failed: {e}") from e

        if response.status_code != 200:
            raise RpcError(f"{method} failed with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise RpcError(f"{method} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RpcError(f"{method} returned a non-object response")
        if data.get("error"):
            raise RpcError(f"{method} returned an error: {data['error']}")
        if "result" not in data:
            raise RpcError(f"{method} returned no result")
        return data["result"]

    def get_account_data(self, address: str, expected_owner: Optional[str] = None) -> bytes:
        result = self.call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.commitment}],
        )
        with malformed_payload("getAccountInfo"):
            account = result["value"]
            if account is None:
                raise AccountNotFoundError(f"Account {address} not found")
            owner = account["owner"]
            data, encoding = account["data"]
            if encoding != "base64":
                raise RpcError(f"Unexpected account encoding {encoding}")
            raw = base64.b64decode(data, validate=True)

        if expected_owner is not None and owner != expected_owner:
            raise RpcError(
                f"Account {address} is owned by {owner}, expected {expected_owner}"
            )
        return raw

    def get_token_supply(self, mint: str) -> int:
        result = self.call("getTokenSupply", [mint, {"commitment": self.commitment}])
        with malformed_payload("getTokenSupply"):
            amount = result["value"]["amount"]
        return parse_amount(amount, f"supply of {mint}")

    def get_token_account_balance(self, token_account: str) -> int:
        result = self.call(
            "getTokenAccountBalance", [token_account, {"commitment": self.commitment}]
        )
        with malformed_payload("getTokenAccountBalance"):
            amount = result["value"]["amount"]
        return parse_amount(amount, f"balance of {token_account}")

    def get_wallet_token_balance(self, owner: str, mint: str) -> int:
        """
        Total balance of ``mint`` across every token account ``owner`` holds.

        Covers the associated token account and any other account the wallet
        opened for the mint.
        """
        result = self.call(
            "getTokenAccountsByOwner",
            [
                owner,
                {"mint": mint},
                {"encoding": "jsonParsed", "commitment": self.commitment},
            ],
        )
        total = 0
        with malformed_payload("getTokenAccountsByOwner"):
            accounts: List[Dict[str, Any]] = result["value"]
            for account in accounts:
                pubkey = account["pubkey"]
                info = account["account"]["data"]["parsed"]["info"]
                amount = parse_amount(info["tokenAmount"]["amount"], f"balance of {pubkey}")
                logger.debug("Token account %s holds %s", pubkey, amount)
                total += amount
        return total
