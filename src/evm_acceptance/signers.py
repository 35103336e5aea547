"""
Dev-account signers for acceptance tests.

Signers are eth-account LocalAccounts built from the private keys in the
NetworkConfig.  The first configured key is the deployer / token owner.

Dependencies: eth-account (signing is delegated to it, never re-implemented)
"""

from __future__ import annotations

import secrets

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import NetworkConfig


def generate_key() -> tuple[str, str]:
    """
    Generate a throwaway secp256k1 key.

    Returns:
        Tuple of (private_key_hex, address)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def get_signer(private_key: str) -> LocalAccount:
    """Wrap a 0x-prefixed private key in a LocalAccount."""
    return Account.from_key(private_key)


def get_signers(config: NetworkConfig) -> list[LocalAccount]:
    """
    Signers for every configured private key, in configuration order.

    Raises:
        ValueError: If no private keys are configured
    """
    if not config.private_keys:
        raise ValueError(
            f"No accounts configured for network '{config.name}'. "
            "Set EVM_PRIVATE_KEYS."
        )
    return [get_signer(key) for key in config.private_keys]
