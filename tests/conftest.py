"""Shared fixtures."""

from __future__ import annotations

import httpx
import pytest

from evm_acceptance.config import NetworkConfig
from evm_acceptance.node.eth import EthNode
from evm_acceptance.node.rpc import RpcClient

from helpers import CHAIN_ID, DEV_KEY_0, DEV_KEY_1, ENDPOINT, FakeNode


@pytest.fixture
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def config() -> NetworkConfig:
    return NetworkConfig(
        url=ENDPOINT,
        name="test",
        chain_id=CHAIN_ID,
        private_keys=(DEV_KEY_0, DEV_KEY_1),
    )


@pytest.fixture
def node(config: NetworkConfig, fake_node: FakeNode) -> EthNode:
    return EthNode(RpcClient(config, transport=httpx.MockTransport(fake_node)))
