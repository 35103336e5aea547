"""
Contract handle used by acceptance tests.

Wraps an address + ABI + (optional) signer:
- call:     read-only eth_call, decoded
- transact: signed transaction, receipt and decoded events
- connect:  same contract, different sender
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Optional, Sequence

from eth_account.signers.local import LocalAccount

from ..node.eth import EthNode, RpcError
from .abi import (
    DecodedEvent,
    decode_event_log,
    decode_function_result,
    encode_function_call,
    to_checksum_address,
)
from .tx import ContractRevertedError, deploy_contract, revert_from_rpc_error, send_transaction


@dataclass
class TxResult:
    """Outcome of a mined transaction."""

    tx_hash: str
    receipt: dict[str, Any]
    status: int
    address: str
    abi: list = field(default_factory=list, repr=False)

    def events(self, name: Optional[str] = None) -> list[DecodedEvent]:
        """Decoded events emitted by the contract, optionally filtered by name."""
        decoded = []
        for log in self.receipt.get("logs", []):
            if (log.get("address") or "").lower() != self.address.lower():
                continue
            event = decode_event_log(self.abi, log)
            if event is not None and (name is None or event.name == name):
                decoded.append(event)
        return decoded


class Contract:
    """A deployed contract bound to a node and, optionally, a signer."""

    def __init__(
        self,
        node: EthNode,
        address: str,
        abi: list,
        signer: Optional[LocalAccount] = None,
    ) -> None:
        self.node = node
        self.address = to_checksum_address(address)
        self.abi = abi
        self.signer = signer

    def __repr__(self) -> str:
        return f"Contract({self.address})"

    def connect(self, signer: LocalAccount) -> "Contract":
        """Same contract, transactions sent by ``signer``."""
        return Contract(self.node, self.address, self.abi, signer=signer)

    @classmethod
    async def deploy(
        cls,
        node: EthNode,
        signer: LocalAccount,
        artifact: dict[str, Any],
        *constructor_args: Any,
        gas_limit: Optional[int] = None,
    ) -> "Contract":
        """
        Deploy ``artifact`` (as returned by load_artifact) and bind to it.
        """
        result = await deploy_contract(
            node,
            signer,
            artifact["bytecode"],
            abi=artifact["abi"],
            constructor_args=list(constructor_args),
            gas_limit=gas_limit,
        )
        return cls(node, result["contract_address"], artifact["abi"], signer=signer)

    async def call(self, function_name: str, *args: Any) -> Any:
        """
        Read-only call.

        Raises:
            ContractRevertedError: If the call reverts
        """
        tx: dict[str, Any] = {
            "to": self.address,
            "data": encode_function_call(self.abi, function_name, list(args)),
        }
        if self.signer is not None:
            tx["from"] = self.signer.address

        try:
            result = await self.node.call(tx)
        except RpcError as exc:
            reverted = revert_from_rpc_error(exc, self.abi)
            if reverted is None:
                raise
            raise reverted from exc

        if result is None or result == "0x":
            return None
        return decode_function_result(self.abi, function_name, result)

    async def transact(
        self,
        function_name: str,
        *args: Any,
        value: int = 0,
        gas_limit: Optional[int] = None,
    ) -> TxResult:
        """
        Send a state-changing call and wait for it to be mined.

        Raises:
            ValueError: If no signer is connected
            ContractRevertedError: If estimation or execution reverts
        """
        if self.signer is None:
            raise ValueError(f"{self!r} has no signer; use connect(signer)")

        tx: dict[str, Any] = {
            "to": self.address,
            "data": encode_function_call(self.abi, function_name, list(args)),
            "value": value,
        }
        if gas_limit is not None:
            tx["gas"] = gas_limit

        result = await send_transaction(self.node, self.signer, tx, abi=self.abi)
        if result["status"] != 1:
            raise ContractRevertedError(None, result["tx_hash"])

        return TxResult(
            tx_hash=result["tx_hash"],
            receipt=result["receipt"],
            status=result["status"],
            address=self.address,
            abi=self.abi,
        )


async def balance_changes(
    contract: Contract,
    addresses: Sequence[str],
    action: Awaitable[Any],
) -> list[int]:
    """
    Token balance deltas caused by ``action``.

    Reads balanceOf for every address, awaits ``action``, reads again and
    returns after - before in the order of ``addresses``.
    """
    before = [await contract.call("balanceOf", a) for a in addresses]
    await action
    after = [await contract.call("balanceOf", a) for a in addresses]
    return [a - b for a, b in zip(after, before)]
