import base64
from unittest.mock import Mock

import pytest
import requests

from services.solana_rpc import AccountNotFoundError, RpcError, SolanaRpcClient

LP_MINT = "21bR3D4QR4GzopVco44PVMBXwHFpSYrbrdeNwdKk7umb"
WALLET = "5ZTBXQRpKa7TUVeYgC8tXVEFiMaTe77nR1aJcBRdF1Vz"


def make_client(payload, status_code=200):
    session = Mock()
    session.post.return_value = Mock(
        status_code=status_code, json=Mock(return_value=payload)
    )
    client = SolanaRpcClient("http://rpc.test", session=session, timeout=5)
    return client, session


def sent_payload(session):
    return session.post.call_args.kwargs["json"]


def test_get_account_data():
    raw = b"\x01\x02vault"
    client, session = make_client(
        {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {
                "context": {"slot": 1},
                "value": {
                    "data": [base64.b64encode(raw).decode(), "base64"],
                    "owner": "24Uqj9JCLxUeoC3hGfh5W3s9FM9uCHDS2SG3LYwBpyTi",
                },
            },
        }
    )

    assert client.get_account_data("vault-address") == raw

    payload = sent_payload(session)
    assert payload["method"] == "getAccountInfo"
    assert payload["params"] == [
        "vault-address",
        {"encoding": "base64", "commitment": "confirmed"},
    ]
    assert session.post.call_args.args == ("http://rpc.test",)
    assert session.post.call_args.kwargs["timeout"] == 5


def test_get_account_data_owner_mismatch():
    client, _ = make_client(
        {"result": {"value": {"data": ["", "base64"], "owner": "someone-else"}}}
    )
    with pytest.raises(RpcError, match="owned by someone-else"):
        client.get_account_data("vault-address", expected_owner="vault-program")


def test_get_account_data_missing_account():
    client, _ = make_client({"result": {"context": {"slot": 1}, "value": None}})
    with pytest.raises(AccountNotFoundError):
        client.get_account_data("vault-address")


def test_get_token_supply():
    client, session = make_client(
        {"result": {"value": {"amount": "200000", "decimals": 9, "uiAmount": 0.0002}}}
    )
    assert client.get_token_supply(LP_MINT) == 200_000
    assert sent_payload(session)["method"] == "getTokenSupply"


def test_get_token_account_balance():
    client, session = make_client({"result": {"value": {"amount": "50000"}}})
    assert client.get_token_account_balance("token-account") == 50_000
    assert sent_payload(session)["params"][0] == "token-account"


def test_unparseable_amount():
    client, _ = make_client({"result": {"value": {"amount": "12.5"}}})
    with pytest.raises(RpcError, match="Cannot parse"):
        client.get_token_supply(LP_MINT)


def _token_account(pubkey, amount):
    return {
        "pubkey": pubkey,
        "account": {
            "data": {
                "parsed": {"info": {"mint": LP_MINT, "tokenAmount": {"amount": amount}}},
                "program": "spl-token",
            }
        },
    }


def test_get_wallet_token_balance_sums_accounts():
    client, session = make_client(
        {"result": {"value": [_token_account("ata", "30000"), _token_account("other", "20000")]}}
    )

    assert client.get_wallet_token_balance(WALLET, LP_MINT) == 50_000

    payload = sent_payload(session)
    assert payload["method"] == "getTokenAccountsByOwner"
    assert payload["params"][:2] == [WALLET, {"mint": LP_MINT}]
    assert payload["params"][2]["encoding"] == "jsonParsed"


def test_get_wallet_token_balance_without_accounts():
    client, _ = make_client({"result": {"value": []}})
    assert client.get_wallet_token_balance(WALLET, LP_MINT) == 0


def test_rpc_error_payload():
    client, _ = make_client(
        {"error": {"code": -32602, "message": "Invalid param: WrongSize"}}
    )
    with pytest.raises(RpcError, match="WrongSize"):
        client.get_token_supply(LP_MINT)


def test_http_error_status():
    client, _ = make_client({}, status_code=429)
    with pytest.raises(RpcError, match="status 429"):
        client.get_token_supply(LP_MINT)


def test_transport_failure():
    session = Mock()
    session.post.side_effect = requests.ConnectionError("connection refused")
    client = SolanaRpcClient("http://rpc.test", session=session)
    with pytest.raises(RpcError, match="connection refused"):
        client.get_token_supply(LP_MINT)


def test_request_ids_increase():
    client, session = make_client({"result": {"value": {"amount": "1"}}})
    client.get_token_supply(LP_MINT)
    client.get_token_supply(LP_MINT)
    assert sent_payload(session)["id"] == 2


@pytest.mark.parametrize(
    "payload",
    [
        {"result": {"context": {"slot": 1}}},
        {"result": None},
        {"result": {"value": {"owner": "vault-program"}}},
        {"result": {"value": {"data": "AAAA", "owner": "vault-program"}}},
        {"result": {"value": {"data": ["not base64!", "base64"], "owner": "vault-program"}}},
    ],
)
def test_get_account_data_malformed_payload(payload):
    client, _ = make_client(payload)
    with pytest.raises(RpcError, match="malformed payload"):
        client.get_account_data("vault-address")


@pytest.mark.parametrize(
    "payload", [{"result": {"value": None}}, {"result": {"context": {"slot": 1}}}, {"result": {"value": {}}}]
)
def test_get_token_supply_malformed_payload(payload):
    client, _ = make_client(payload)
    with pytest.raises(RpcError, match="malformed payload"):
        client.get_token_supply(LP_MINT)


def test_get_token_account_balance_null_value():
    client, _ = make_client({"result": {"value": None}})
    with pytest.raises(RpcError, match="malformed payload"):
        client.get_token_account_balance("token-account")


def test_get_wallet_token_balance_missing_token_amount():
    broken = {"pubkey": "ata", "account": {"data": {"parsed": {"info": {"mint": LP_MINT}}}}}
    client, _ = make_client({"result": {"value": [broken]}})
    with pytest.raises(RpcError, match="malformed payload"):
        client.get_wallet_token_balance(WALLET, LP_MINT)


def test_non_object_response():
    client, _ = make_client(["unexpected"])
    with pytest.raises(RpcError, match="non-object"):
        client.get_token_supply(LP_MINT)

