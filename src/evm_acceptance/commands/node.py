"""
Node commands - talk to the configured node directly.

Commands:
- call:         Send a raw JSON-RPC request and print the response verbatim
- block-number: Show the latest block
- balance:      Show the ETH balance of an address
- accounts:     List configured signers (or the node's unlocked accounts)
"""

from __future__ import annotations

import json
import sys

import click

from ..signers import get_signers
from . import get_config, get_node, run


def _parse_id(raw: str) -> object:
    try:
        return int(raw)
    except ValueError:
        return raw


@click.command("call")
@click.argument("method")
@click.option("--params", "params_json", default="[]", help="Params as JSON array")
@click.option("--id", "request_id", default="1", help="Request id (int or string)")
@click.pass_context
def call(ctx: click.Context, method: str, params_json: str, request_id: str) -> None:
    """
    Send a raw JSON-RPC request.

    \b
    Examples:
      evm-acceptance call eth_blockNumber
      evm-acceptance call eth_getBalance --params '["0xabc...", "latest"]'
    """
    try:
        params = json.loads(params_json)
        if not isinstance(params, list):
            raise ValueError("Params must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        click.secho(f"ERROR: Invalid params: {exc}", fg="red")
        sys.exit(1)

    node = get_node(ctx)
    data = run(node.client.call_method, method, _parse_id(request_id), params)
    click.echo(json.dumps(data, indent=2))


@click.command("block-number")
@click.pass_context
def block_number(ctx: click.Context) -> None:
    """Show the latest block number."""
    node = get_node(ctx)
    click.echo(run(node.block_number))


@click.command()
@click.argument("address")
@click.pass_context
def balance(ctx: click.Context, address: str) -> None:
    """Show the ETH balance of ADDRESS."""
    node = get_node(ctx)
    wei = run(node.get_balance, address)
    click.echo(f"{address}: {wei / 10**18:.6f} ETH ({wei} wei)")


@click.command()
@click.pass_context
def accounts(ctx: click.Context) -> None:
    """List signer addresses."""
    config = get_config(ctx)
    if config.private_keys:
        for index, signer in enumerate(get_signers(config)):
            click.echo(f"  [{index}] {signer.address}")
        return

    node = get_node(ctx)
    unlocked = run(node.accounts)
    if not unlocked:
        click.echo("No accounts configured. Set EVM_PRIVATE_KEYS.")
        return
    click.echo(click.style("  (unlocked on node)", dim=True))
    for index, address in enumerate(unlocked):
        click.echo(f"  [{index}] {address}")
