"""
Token commands - ERC-20 operations against the configured node.

Commands:
- balance:  Show token balance for one address or every configured signer
- transfer: Send tokens from a configured signer
"""

from __future__ import annotations

import sys
from decimal import Context, Decimal, InvalidOperation
from typing import Optional

import click

from ..contracts.contract import Contract
from ..contracts.erc20 import ERC20_ABI, token_metadata
from ..node.eth import EthNode
from ..signers import get_signers
from . import get_config, get_node, run

# wide enough for any uint256, so scaling never rounds
UINT256_CONTEXT = Context(prec=80)


@click.group()
def token() -> None:
    """ERC-20 token operations.

    \b
    Examples:
      evm-acceptance token balance --token 0xAbC...
      evm-acceptance token transfer --token 0xAbC... --to 0x... --amount 10
    """


@token.command("balance")
@click.option("--token", "token_address", required=True, help="ERC-20 contract address")
@click.option("--address", default=None, help="Holder (default: every configured signer)")
@click.pass_context
def token_balance(ctx: click.Context, token_address: str, address: Optional[str]) -> None:
    """Show ERC-20 token balances."""
    if address:
        holders = [address]
    else:
        try:
            holders = [s.address for s in get_signers(get_config(ctx))]
        except ValueError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(1)

    node = get_node(ctx)

    async def _query() -> tuple[str, int, list[int]]:
        contract = Contract(node, token_address, ERC20_ABI)
        symbol, decimals = await token_metadata(contract)
        balances = [await contract.call("balanceOf", h) for h in holders]
        return symbol, decimals, balances

    symbol, decimals, balances = run(_query)

    click.echo(f"=== {symbol} Balance ({get_config(ctx).name}) ===")
    click.echo()
    click.echo(click.style("  Token:    ", dim=True) + token_address)
    click.echo(click.style("  Decimals: ", dim=True) + str(decimals))
    click.echo()
    for holder, raw in zip(holders, balances):
        human = Decimal(raw).scaleb(-decimals, context=UINT256_CONTEXT)
        click.echo(
            click.style(f"  {holder}: ", dim=True)
            + click.style(f"{human:,.{decimals}f} {symbol}", fg="bright_white")
        )
    click.echo()


@token.command("transfer")
@click.option("--token", "token_address", required=True, help="ERC-20 contract address")
@click.option("--to", "recipient", required=True, help="Recipient address (0x...)")
@click.option("--amount", required=True,
              help="Amount in human-readable units (e.g. 1.5)")
@click.option("--signer", "signer_index", default=0, type=int,
              help="Index of the configured signer to send from")
@click.pass_context
def token_transfer(
    ctx: click.Context,
    token_address: str,
    recipient: str,
    amount: str,
    signer_index: int,
) -> None:
    """Transfer ERC-20 tokens from a configured signer."""
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise click.BadParameter(f"{amount!r} is not a number", param_hint="--amount") from None
    if not value.is_finite() or value <= 0:
        raise click.BadParameter("Amount must be positive", param_hint="--amount")

    try:
        signer = get_signers(get_config(ctx))[signer_index]
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except IndexError:
        click.secho(f"ERROR: No signer at index {signer_index}", fg="red")
        sys.exit(1)

    node = get_node(ctx)

    async def _transfer(node: EthNode) -> tuple[str, int, str]:
        contract = Contract(node, token_address, ERC20_ABI, signer=signer)
        symbol, decimals = await token_metadata(contract)
        raw = value.scaleb(decimals, context=UINT256_CONTEXT)
        if raw != raw.to_integral_value():
            raise click.BadParameter(
                f"{symbol} has {decimals} decimals, {amount} is finer than that",
                param_hint="--amount",
            )
        raw_amount = int(raw)
        result = await contract.transact("transfer", recipient, raw_amount)
        return symbol, raw_amount, result.tx_hash

    click.echo(click.style("  From:   ", dim=True) + signer.address)
    click.echo(click.style("  To:     ", dim=True) + recipient)

    symbol, raw_amount, tx_hash = run(_transfer, node)

    click.echo(click.style("  Amount: ", dim=True) + f"{amount} {symbol} ({raw_amount} raw)")
    click.secho("  Transfer successful!", fg="green", bold=True)
    click.echo(click.style("  TX: ", dim=True) + tx_hash)
