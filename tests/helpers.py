"""In-memory JSON-RPC node behind httpx.MockTransport, plus dev accounts."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx

from evm_acceptance.config import NetworkConfig
from evm_acceptance.node.rpc import RpcClient

ENDPOINT = "http://node.test:8545"
CHAIN_ID = 31337

# Well-known Hardhat / Anvil development accounts #0 and #1
DEV_KEY_0 = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_KEY_1 = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
DEV_ADDRESS_0 = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
DEV_ADDRESS_1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class FakeNode:
    """Answers JSON-RPC requests from per-method handlers and records them."""

    def __init__(self) -> None:
        self.handlers: dict[str, Callable[[list], dict[str, Any]]] = {}
        self.requests: list[dict[str, Any]] = []

    def on(self, method: str, result: Any = None) -> None:
        self.handlers[method] = lambda params: {"result": result}

    def on_call(self, method: str, func: Callable[[list], Any]) -> None:
        self.handlers[method] = lambda params: {"result": func(params)}

    def on_error(self, method: str, code: int, message: str, data: Any = None) -> None:
        error: dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            error["data"] = data
        self.handlers[method] = lambda params: {"error": error}

    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def params_of(self, method: str) -> list:
        return [r["params"] for r in self.requests if r["method"] == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)

        handler = self.handlers.get(payload["method"])
        if handler is None:
            body: dict[str, Any] = {
                "error": {"code": -32601, "message": f"Method {payload['method']} not found"}
            }
        else:
            body = handler(payload["params"])

        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], **body})


def word(value: int) -> str:
    """A uint256 as 0x-prefixed return data."""
    return "0x" + value.to_bytes(32, "big").hex()


def address_topic(address: str) -> str:
    return "0x" + "0" * 24 + address.lower().replace("0x", "")


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    url: Optional[str] = None,
) -> RpcClient:
    return RpcClient(NetworkConfig(url=url or ENDPOINT), transport=httpx.MockTransport(handler))
