"""
JSON-RPC Client for a development node.

One POST per call, no retries and no timeout.  The response body is handed
back verbatim; interpreting ``result`` / ``error`` is left to the caller
(see ``node.eth``).

Uses ``httpx.AsyncClient`` so calls can be awaited from anyio tasks.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence

import httpx

from ..config import NetworkConfig

log = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
HTTP_OK = 200


@dataclass(frozen=True)
class JsonRpcRequest:
    """Outbound JSON-RPC 2.0 request envelope."""

    id: Any
    method: str
    params: Sequence[Any]
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
        }


class TransportError(Exception):
    """Raised when the node answers with an HTTP status other than 200."""

    def __init__(self, endpoint: str, request: dict[str, Any], status_code: int) -> None:
        self.endpoint = endpoint
        self.request = request
        self.status_code = status_code
        super().__init__(
            f"Can't connect to {endpoint} (HTTP {status_code})\n"
            f" Send: {json.dumps(request, indent=2)}"
        )


class RpcClient:
    """Stateless JSON-RPC 2.0 over HTTP client.

    Parameters
    ----------
    config : NetworkConfig
        Supplies the endpoint URL.
    transport : httpx.AsyncBaseTransport, optional
        Transport override (tests pass an ``httpx.MockTransport``).  It is
        opened and closed with every call, so it must be reusable.
    """

    def __init__(
        self,
        config: NetworkConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self.config.url

    async def call_method(self, method: str, request_id: Any, params: Sequence[Any]) -> Any:
        """
        Send one JSON-RPC request and return the decoded response body.

        Args:
            method: Remote procedure name (e.g. "eth_blockNumber")
            request_id: Caller-chosen id, echoed in the envelope
            params: Positional arguments, passed through untouched

        Returns:
            The response body as parsed JSON, uninterpreted

        Raises:
            TransportError: If the HTTP status is not 200
            httpx.TransportError: On connection-level failures (unwrapped)
        """
        payload = JsonRpcRequest(id=request_id, method=method, params=params).to_dict()
        url = self.endpoint

        log.debug("rpc -> %s(id=%s) at %s", method, request_id, url)

        async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
            response = await client.post(url, json=payload)

        if response.status_code != HTTP_OK:
            raise TransportError(url, payload, response.status_code)

        return response.json()


async def on_success(
    call: Awaitable[Any],
    callback: Callable[[Any, int], Any],
) -> None:
    """
    Await an RPC call and hand its body to ``callback(data, 200)``.

    The callback runs exactly once, after the call succeeded, and is awaited
    if it returns an awaitable.  A failed call propagates and the callback
    is never invoked.
    """
    data = await call
    outcome = callback(data, HTTP_OK)
    if inspect.isawaitable(outcome):
        await outcome
