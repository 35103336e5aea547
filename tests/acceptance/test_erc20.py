"""
OpenZeppelin ERC-20 acceptance suite.

Runs against a live development node.  Needs:
  EVM_ACCEPTANCE_LIVE=1
  EVM_RPC_URL / EVM_NETWORK pointing at the node
  EVM_PRIVATE_KEYS with at least three funded accounts
  EVM_ARTIFACTS_DIR pointing at the compiled OpenZeppelinGLDToken output

The source lives in tests/acceptance/contracts/ and imports
@openzeppelin/contracts; compile it with forge or hardhat and point
EVM_ARTIFACTS_DIR at the out/ (or artifacts/contracts/) directory.

One token is deployed per module; tests run in order and build on each
other's state, like the suites they replace.
"""

from __future__ import annotations

import os

import anyio
import pytest

from evm_acceptance import (
    ArtifactNotFoundError,
    Contract,
    ContractRevertedError,
    EthNode,
    RpcClient,
    balance_changes,
    get_signers,
    load_artifact,
    load_network_config,
)

pytestmark = [
    pytest.mark.live,
    pytest.mark.skipif(
        os.environ.get("EVM_ACCEPTANCE_LIVE") != "1",
        reason="needs a live node (set EVM_ACCEPTANCE_LIVE=1)",
    ),
]

TOTAL_SUPPLY = 1_000_000


@pytest.fixture(scope="module")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="module")
def node() -> EthNode:
    return EthNode(RpcClient(load_network_config()))


@pytest.fixture(scope="module")
def signers(node: EthNode) -> list:
    accounts = get_signers(node.client.config)
    if len(accounts) < 3:
        pytest.skip("needs three accounts in EVM_PRIVATE_KEYS")
    return accounts


@pytest.fixture(scope="module")
async def token(node: EthNode, signers: list) -> Contract:
    try:
        artifact = load_artifact("OpenZeppelinGLDToken")
    except ArtifactNotFoundError as exc:
        pytest.skip(str(exc))
    return await Contract.deploy(node, signers[0], artifact, TOTAL_SUPPLY)


# ---------------------------------------------------------------------------
# General
# ---------------------------------------------------------------------------

@pytest.mark.anyio
async def test_total_supply(token: Contract) -> None:
    assert await token.call("totalSupply") == TOTAL_SUPPLY


@pytest.mark.anyio
async def test_owner_holds_total_supply_at_start(token: Contract, signers: list) -> None:
    owner = signers[0]
    assert await token.call("balanceOf", owner.address) == TOTAL_SUPPLY


# ---------------------------------------------------------------------------
# Transfer
# ---------------------------------------------------------------------------

@pytest.mark.anyio
async def test_owner_can_transfer(token: Contract, signers: list) -> None:
    owner, receiver = signers[0], signers[1]
    results = []

    async def send() -> None:
        results.append(await token.transact("transfer", receiver.address, 1000))

    changes = await balance_changes(token, [receiver.address, owner.address], send())

    assert changes == [1000, -1000]
    (event,) = results[0].events("Transfer")
    assert event.args["from"].lower() == owner.address.lower()
    assert event.args["to"].lower() == receiver.address.lower()
    assert event.args["value"] == 1000


@pytest.mark.anyio
async def test_account_without_tokens_cannot_transfer(token: Contract, signers: list) -> None:
    stranger = signers[2]
    before = await token.call("balanceOf", stranger.address)

    with pytest.raises(ContractRevertedError):
        await token.connect(stranger).transact("transfer", stranger.address, 1000)

    assert await token.call("balanceOf", stranger.address) == before


@pytest.mark.anyio
async def test_cannot_move_more_than_available(token: Contract, signers: list) -> None:
    receiver = signers[1]
    total_supply = await token.call("totalSupply")

    with pytest.raises(ContractRevertedError) as exc_info:
        await token.transact("transfer", receiver.address, total_supply + 1)

    assert exc_info.value.reason == "ERC20: transfer amount exceeds balance"


# ---------------------------------------------------------------------------
# Transfer From
# ---------------------------------------------------------------------------

@pytest.mark.anyio
async def test_transfer_from_needs_allowance(token: Contract, signers: list) -> None:
    sender, spender = signers[1], signers[2]
    await token.transact("transfer", sender.address, 5_000)

    with pytest.raises(ContractRevertedError) as exc_info:
        await token.transact("transferFrom", sender.address, spender.address, 2_999)

    assert exc_info.value.reason == "ERC20: insufficient allowance"


@pytest.mark.anyio
async def test_transfer_from_within_allowance(token: Contract, signers: list) -> None:
    owner, sender, spender = signers[0], signers[1], signers[2]

    # Fund the sender and approve the owner in parallel
    async with anyio.create_task_group() as tg:
        tg.start_soon(token.transact, "transfer", sender.address, 5_000)
        tg.start_soon(token.connect(sender).transact, "approve", owner.address, 2_000)

    results = []

    async def move() -> None:
        results.append(
            await token.transact("transferFrom", sender.address, spender.address, 1_999)
        )

    changes = await balance_changes(token, [sender.address, spender.address], move())

    assert changes == [-1_999, 1_999]
    (event,) = results[0].events("Transfer")
    assert event.args["from"].lower() == sender.address.lower()
    assert event.args["to"].lower() == spender.address.lower()
    assert event.args["value"] == 1_999

    assert await token.call("allowance", sender.address, owner.address) == 1
