"""
Commands - click subcommands of the evm-acceptance CLI.

- node:  raw JSON-RPC calls and chain queries (call, block-number, balance, accounts)
- token: ERC-20 balance and transfer
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Coroutine

import anyio
import click
import httpx

from ..config import NetworkConfig
from ..contracts.tx import ContractRevertedError
from ..node.eth import EthNode, RpcError
from ..node.rpc import RpcClient, TransportError


def get_config(ctx: click.Context) -> NetworkConfig:
    return ctx.find_root().obj["config"]


def get_node(ctx: click.Context) -> EthNode:
    """Build an EthNode from the root context (tests may inject "transport")."""
    obj = ctx.find_root().obj
    return EthNode(RpcClient(obj["config"], transport=obj.get("transport")))


def run(func: Callable[..., Coroutine[Any, Any, Any]], *args: Any) -> Any:
    """Run a coroutine function, turning node failures into exit code 1."""
    try:
        return anyio.run(func, *args)
    except (TransportError, RpcError, ContractRevertedError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except httpx.TransportError as exc:
        click.secho(f"ERROR: Cannot reach node: {exc}", fg="red")
        sys.exit(1)
