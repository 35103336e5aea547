"""
Transaction Builder - fill, sign, send and confirm transactions.

Signing is delegated to eth-account; nonce, gas price, chain id and gas
limit are asked from the node.  A revert detected while estimating gas is
surfaced as ContractRevertedError with the decoded reason.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..node.eth import EthNode, RpcError, from_quantity, to_quantity
from .abi import decode_revert_reason, encode_constructor_args, to_checksum_address

log = logging.getLogger(__name__)


class ContractRevertedError(Exception):
    """Raised when a call or transaction reverts."""

    def __init__(self, reason: Optional[str], tx_hash: Optional[str] = None) -> None:
        self.reason = reason
        self.tx_hash = tx_hash
        message = f"Transaction reverted: {reason}" if reason else "Transaction reverted"
        if tx_hash:
            message += f" (tx {tx_hash})"
        super().__init__(message)


def revert_from_rpc_error(exc: RpcError, abi: Optional[list] = None) -> Optional[ContractRevertedError]:
    """
    Map a node error to ContractRevertedError if it describes a revert.

    Returns None when the error is something else (bad params, funds, ...).
    """
    reason = decode_revert_reason(exc.error.data, abi)
    if reason is not None:
        return ContractRevertedError(reason)

    message = exc.error.message or ""
    if "revert" not in message.lower():
        return None

    # "execution reverted: ERC20: ..." / "VM Exception ... reverted with reason string '...'"
    marker = "reverted with reason string "
    if marker in message:
        return ContractRevertedError(message.split(marker, 1)[1].strip("'\""))
    if ":" in message:
        return ContractRevertedError(message.split(":", 1)[1].strip() or None)
    return ContractRevertedError(None)


def _call_params(tx: dict[str, Any], sender: str) -> dict[str, Any]:
    """Shape a transaction dict for eth_call / eth_estimateGas."""
    params: dict[str, Any] = {"from": sender, "data": tx.get("data", "0x")}
    if tx.get("to"):
        params["to"] = tx["to"]
    if tx.get("value"):
        params["value"] = to_quantity(tx["value"])
    return params


async def fill_transaction(
    node: EthNode,
    signer: LocalAccount,
    tx: dict[str, Any],
    abi: Optional[list] = None,
) -> dict[str, Any]:
    """
    Complete a transaction dict for signing.

    Fills nonce, gasPrice, chainId and gas unless already present.

    Raises:
        ContractRevertedError: If gas estimation reports a revert
    """
    filled = dict(tx)
    filled.setdefault("value", 0)
    if filled.get("to"):
        filled["to"] = to_checksum_address(filled["to"])

    if "nonce" not in filled:
        filled["nonce"] = await node.get_transaction_count(signer.address)
    if "gasPrice" not in filled:
        filled["gasPrice"] = await node.gas_price()
    if "chainId" not in filled:
        filled["chainId"] = node.client.config.chain_id or await node.chain_id()

    if "gas" not in filled:
        try:
            filled["gas"] = await node.estimate_gas(_call_params(filled, signer.address))
        except RpcError as exc:
            reverted = revert_from_rpc_error(exc, abi)
            if reverted is None:
                raise
            raise reverted from exc

    return filled


async def send_transaction(
    node: EthNode,
    signer: LocalAccount,
    tx: dict[str, Any],
    abi: Optional[list] = None,
    wait: bool = True,
    timeout: float = 120,
) -> dict[str, Any]:
    """
    Fill, sign and send a transaction.

    Args:
        node: Node to send through
        signer: eth-account signer paying gas
        tx: Partial transaction (to, data, value, ...)
        abi: ABI used to decode custom revert errors
        wait: Whether to wait for the receipt
        timeout: Receipt wait timeout in seconds

    Returns:
        Dict with tx_hash and, if waited, receipt and status
    """
    filled = await fill_transaction(node, signer, tx, abi=abi)

    signed = signer.sign_transaction(filled)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()

    tx_hash = await node.send_raw_transaction(raw_tx)
    log.debug("sent %s from %s (nonce=%s)", tx_hash, signer.address, filled["nonce"])
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = await node.wait_for_receipt(tx_hash, timeout=timeout)
        result["receipt"] = receipt
        result["status"] = from_quantity(receipt.get("status", "0x0"))

    return result


async def deploy_contract(
    node: EthNode,
    signer: LocalAccount,
    bytecode: str,
    abi: Optional[list] = None,
    constructor_args: Optional[list] = None,
    gas_limit: Optional[int] = None,
    timeout: float = 180,
) -> dict[str, Any]:
    """
    Deploy a contract from pre-compiled bytecode.

    Returns:
        Dict with tx_hash, status, receipt and contract_address

    Raises:
        ContractRevertedError: If the creation transaction fails
    """
    if not bytecode or bytecode == "0x":
        raise ValueError("Cannot deploy empty bytecode (abstract contract or interface?)")

    deploy_data = bytecode if bytecode.startswith("0x") else "0x" + bytecode
    if constructor_args:
        deploy_data += encode_constructor_args(abi or [], constructor_args)

    tx: dict[str, Any] = {"data": deploy_data, "value": 0}
    if gas_limit is not None:
        tx["gas"] = gas_limit

    result = await send_transaction(node, signer, tx, abi=abi, timeout=timeout)
    if result["status"] != 1:
        raise ContractRevertedError("contract creation failed", result["tx_hash"])

    result["contract_address"] = result["receipt"].get("contractAddress")
    return result
