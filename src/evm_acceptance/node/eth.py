"""
Typed eth_* helpers on top of the JSON-RPC client.

Unlike ``RpcClient.call_method`` these look inside the response: a JSON-RPC
``error`` member becomes an ``RpcError`` and hex quantities become ints.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Optional

import anyio

from .rpc import RpcClient

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RpcErrorObject:
    """JSON-RPC 2.0 error object as returned by the node."""

    code: int
    message: str
    data: Any = None


class RpcError(Exception):
    """Raised when the node returns a JSON-RPC error."""

    def __init__(self, method: str, error: RpcErrorObject) -> None:
        self.method = method
        self.error = error
        super().__init__(f"{method} failed: [{error.code}] {error.message}")


def to_quantity(value: int) -> str:
    """Encode an int as a JSON-RPC hex quantity."""
    return hex(value)


def from_quantity(value: str) -> int:
    """Decode a JSON-RPC hex quantity."""
    return int(value, 16)


class EthNode:
    """Ethereum JSON-RPC surface of a node.

    Request ids are allocated from a per-instance counter starting at 1.
    """

    def __init__(self, client: RpcClient) -> None:
        self.client = client
        self._ids = itertools.count(1)

    @property
    def endpoint(self) -> str:
        return self.client.endpoint

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Call ``method`` and return its ``result``.

        Raises:
            RpcError: If the response carries an ``error`` member
        """
        data = await self.client.call_method(method, next(self._ids), params or [])

        error = data.get("error") if isinstance(data, dict) else None
        if error is not None:
            if not isinstance(error, dict):
                # non-conforming node: bare string or number as the error
                raise RpcError(method, RpcErrorObject(code=0, message=str(error)))
            raise RpcError(
                method,
                RpcErrorObject(
                    code=error.get("code", 0),
                    message=error.get("message", ""),
                    data=error.get("data"),
                ),
            )

        return data.get("result") if isinstance(data, dict) else None

    # -- Chain ---------------------------------------------------------

    async def chain_id(self) -> int:
        return from_quantity(await self.request("eth_chainId"))

    async def block_number(self) -> int:
        return from_quantity(await self.request("eth_blockNumber"))

    async def gas_price(self) -> int:
        return from_quantity(await self.request("eth_gasPrice"))

    async def accounts(self) -> list[str]:
        return list(await self.request("eth_accounts") or [])

    # -- Accounts ------------------------------------------------------

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """ETH balance of ``address`` in wei."""
        return from_quantity(await self.request("eth_getBalance", [address, block]))

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        """Next nonce for ``address``."""
        return from_quantity(
            await self.request("eth_getTransactionCount", [address, block])
        )

    # -- Execution -----------------------------------------------------

    async def call(self, tx: dict[str, Any], block: str = "latest") -> str:
        """Execute a read-only call; returns 0x-prefixed return data."""
        return await self.request("eth_call", [tx, block])

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        return from_quantity(await self.request("eth_estimateGas", [tx]))

    async def send_raw_transaction(self, raw_tx: str) -> str:
        """Submit a signed transaction; returns its hash."""
        return await self.request("eth_sendRawTransaction", [raw_tx])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return await self.request("eth_getTransactionReceipt", [tx_hash])

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 0.5,
    ) -> dict[str, Any]:
        """
        Poll until a transaction receipt is available.

        Raises:
            TimeoutError: If the receipt is not found within ``timeout`` seconds
        """
        with anyio.move_on_after(timeout):
            while True:
                receipt = await self.get_transaction_receipt(tx_hash)
                if receipt is not None:
                    return receipt
                log.debug("waiting for receipt of %s", tx_hash)
                await anyio.sleep(poll_interval)

        raise TimeoutError(f"Transaction {tx_hash} not mined within {timeout}s")
