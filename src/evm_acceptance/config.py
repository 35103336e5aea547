"""
Network Configuration for the acceptance harness.

A NetworkConfig is created once at startup and handed to every client
explicitly.  Values come from the process environment, optionally seeded
from a .env file (python-dotenv).

Environment:
  EVM_NETWORK             Network name (default: localhost)
  EVM_RPC_URL_<NETWORK>   Endpoint for that network (e.g. EVM_RPC_URL_LOCALHOST)
  EVM_RPC_URL             Endpoint fallback for any network
  EVM_CHAIN_ID            Expected chain id (optional, else asked from the node)
  EVM_PRIVATE_KEYS        Comma-separated 0x-prefixed dev account keys
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_NETWORK = "localhost"
DEFAULT_ENV = Path(".env")

# Built-in endpoints for well-known local networks
KNOWN_NETWORKS: dict[str, str] = {
    "localhost": "http://127.0.0.1:8545",
    "hardhat": "http://127.0.0.1:8545",
    "anvil": "http://127.0.0.1:8545",
}


class ConfigError(ValueError):
    """Raised when the network configuration is malformed."""


@dataclass(frozen=True)
class NetworkConfig:
    """Where and as whom the harness talks to a node."""

    url: str
    name: str = DEFAULT_NETWORK
    chain_id: Optional[int] = None
    private_keys: tuple[str, ...] = field(default=(), repr=False)


def _normalize_key(key: str) -> str:
    key = key.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    body = key[2:]
    if len(body) != 64:
        raise ConfigError(f"Private key must be 32 bytes of hex, got {len(body)} chars")
    try:
        int(body, 16)
    except ValueError:
        raise ConfigError("Private key is not valid hex") from None
    return key


def parse_private_keys(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated key list, dropping blanks."""
    if not raw:
        return ()
    return tuple(_normalize_key(k) for k in raw.split(",") if k.strip())


def resolve_rpc_url(network: str) -> str:
    """
    Resolve the endpoint for a network.

    Priority: EVM_RPC_URL_<NETWORK>  >  EVM_RPC_URL  >  built-in default.

    Raises:
        ConfigError: If nothing is configured for an unknown network
    """
    specific = os.environ.get(f"EVM_RPC_URL_{network.upper().replace('-', '_')}")
    if specific:
        return specific

    generic = os.environ.get("EVM_RPC_URL")
    if generic:
        return generic

    if network in KNOWN_NETWORKS:
        return KNOWN_NETWORKS[network]

    raise ConfigError(
        f"No RPC URL for network '{network}'. Set EVM_RPC_URL_{network.upper()} "
        f"or EVM_RPC_URL."
    )


def load_network_config(
    env_path: Optional[Path] = None,
    network: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> NetworkConfig:
    """
    Build a NetworkConfig from the environment.

    Args:
        env_path: .env file to load first (default: ./.env, if present)
        network: Network name override (default: EVM_NETWORK or localhost)
        rpc_url: Endpoint override, bypassing the lookup

    Returns:
        Immutable NetworkConfig

    Raises:
        ConfigError: On a malformed chain id or private key
    """
    env_path = env_path or DEFAULT_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    name = network or os.environ.get("EVM_NETWORK", DEFAULT_NETWORK)
    url = rpc_url or resolve_rpc_url(name)

    chain_id: Optional[int] = None
    raw_chain_id = os.environ.get("EVM_CHAIN_ID")
    if raw_chain_id:
        try:
            chain_id = int(raw_chain_id, 0)
        except ValueError:
            raise ConfigError(f"EVM_CHAIN_ID is not an integer: {raw_chain_id!r}") from None

    return NetworkConfig(
        url=url,
        name=name,
        chain_id=chain_id,
        private_keys=parse_private_keys(os.environ.get("EVM_PRIVATE_KEYS")),
    )
