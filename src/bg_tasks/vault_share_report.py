import logging
import sys

import click

from core import constants
from core.config import settings
from core.errors import VaultValuationError
from log import setup_logging_to_console, setup_logging_to_file, setup_logging_to_seq
from services.solana_rpc import RpcError, SolanaRpcClient
from services.valuation import utc_timestamp, value_decoded_position
from utils.vault_layout import decode_vault_state

logger = logging.getLogger("vault_share_report")


def report_user_share(
    client: SolanaRpcClient,
    vault_address: str,
    wallet_address: str,
    token_account: str | None = None,
):
    # sample the clock before any read so every figure refers to one instant
    now = utc_timestamp()

    account_data = client.get_account_data(
        vault_address, expected_owner=constants.VAULT_PROGRAM_ID
    )
    vault_state = decode_vault_state(account_data)
    logger.info(
        "Token mint: %s, lp mint: %s", vault_state.token_mint, vault_state.lp_mint
    )

    total_lp_supply = client.get_token_supply(vault_state.lp_mint)
    if token_account:
        user_balance = client.get_token_account_balance(token_account)
    else:
        user_balance = client.get_wallet_token_balance(
            wallet_address, vault_state.lp_mint
        )

    result = value_decoded_position(
        vault_state, total_lp_supply, user_balance, now=now
    )
    logger.info(
        "User balance: %s, total supply: %s, withdrawable amount: %s",
        user_balance,
        total_lp_supply,
        result.withdrawable_amount,
    )
    logger.info(
        "Vault %s: wallet %s holds %s underlying base units",
        vault_address,
        wallet_address,
        result.underlying_share,
    )
    return result


# Main Execution
@click.command()
@click.option("--vault", "vault_address", default=settings.VAULT_ADDRESS, help="Vault account address")
@click.option("--wallet", "wallet_address", default=settings.WALLET_ADDRESS, help="Wallet holding LP tokens")
@click.option("--token-account", default=None, help="Explicit LP token account to read instead of the wallet lookup")
@click.option(
    "--network",
    type=click.Choice(sorted(constants.NETWORK_RPC_URLS)),
    default="mainnet",
    help="Solana cluster to use",
)
@click.option("--rpc-url", default=None, help="RPC endpoint, overrides --network")
@click.option("--log-file", is_flag=True, help="Also write logs to a timestamped file")
def main(vault_address, wallet_address, token_account, network, rpc_url, log_file):
    level = logging.getLevelName(settings.LOG_LEVEL)
    if not setup_logging_to_seq(level):
        setup_logging_to_console(level)
    if log_file:
        log_path = setup_logging_to_file("vault_share_report", level)
        logger.info("Writing logs to %s", log_path)

    client = SolanaRpcClient(rpc_url or constants.NETWORK_RPC_URLS[network])
    try:
        result = report_user_share(client, vault_address, wallet_address, token_account)
    except (VaultValuationError, RpcError) as e:
        logger.error(
            "Valuation of vault %s failed with %s: %s",
            vault_address,
            type(e).__name__,
            e,
            exc_info=True,
        )
        sys.exit(1)

    click.echo(result.model_dump_json())


if __name__ == "__main__":
    main()
