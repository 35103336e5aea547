"""
evm-acceptance CLI

Command-line companion to the acceptance suite: poke the development node
the suite runs against, with the same configuration.

Commands:
  call          - Send a raw JSON-RPC request
  block-number  - Show the latest block
  balance       - Show an ETH balance
  accounts      - List signer addresses
  token         - ERC-20 balance / transfer
  info          - Show configuration
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import ConfigError, load_network_config
from .contracts.abi import ArtifactNotFoundError, find_artifacts_dir


# ============ Constants ============

VERSION = "0.1.0"


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo(
        click.style("        E V M   A C C E P T A N C E", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="evm-acceptance")
@click.option("--env-file", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help=".env file to load (default: ./.env)")
@click.option("--network", default=None, help="Network name (default: EVM_NETWORK or localhost)")
@click.option("--rpc-url", default=None, help="Node RPC URL, overrides the network lookup")
@click.option("-v", "--verbose", is_flag=True, help="Log RPC traffic")
@click.pass_context
def cli(
    ctx: click.Context,
    env_file: Optional[Path],
    network: Optional[str],
    rpc_url: Optional[str],
    verbose: bool,
) -> None:
    """Acceptance-test harness for EVM smart contracts."""
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    try:
        ctx.obj["config"] = load_network_config(env_file, network=network, rpc_url=rpc_url)
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Subcommands ============

from .commands.node import accounts, balance, block_number, call
from .commands.token import token

cli.add_command(call)
cli.add_command(block_number)
cli.add_command(balance)
cli.add_command(accounts)
cli.add_command(token)


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show configuration."""
    config = ctx.obj["config"]
    _print_banner()

    click.secho("  Network ────────────────────────────────", fg="cyan")
    click.echo()
    click.echo(click.style("  Name:      ", dim=True) + click.style(config.name, fg="bright_white"))
    click.echo(click.style("  RPC URL:   ", dim=True) + click.style(config.url, fg="bright_white"))
    chain = str(config.chain_id) if config.chain_id is not None else "from node"
    click.echo(click.style("  Chain ID:  ", dim=True) + chain)
    click.echo(click.style("  Accounts:  ", dim=True) + str(len(config.private_keys)))

    try:
        artifacts = click.style(str(find_artifacts_dir()), fg="green")
    except ArtifactNotFoundError:
        artifacts = click.style("not found", fg="yellow") + click.style(
            "  (compile contracts first)", dim=True
        )
    click.echo(click.style("  Artifacts: ", dim=True) + artifacts)
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """evm-acceptance CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
