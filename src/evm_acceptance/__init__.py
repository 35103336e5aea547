__all__ = [
    # Configuration
    "ConfigError",
    "NetworkConfig",
    "load_network_config",
    # JSON-RPC client
    "JsonRpcRequest",
    "RpcClient",
    "TransportError",
    "on_success",
    # Eth helpers
    "EthNode",
    "RpcError",
    "RpcErrorObject",
    # Signers
    "generate_key",
    "get_signer",
    "get_signers",
    # Contracts
    "ArtifactNotFoundError",
    "Contract",
    "ContractRevertedError",
    "DecodedEvent",
    "TxResult",
    "balance_changes",
    "load_artifact",
]

from .config import ConfigError, NetworkConfig, load_network_config
from .node.rpc import JsonRpcRequest, RpcClient, TransportError, on_success
from .node.eth import EthNode, RpcError, RpcErrorObject
from .signers import generate_key, get_signer, get_signers
from .contracts.abi import ArtifactNotFoundError, DecodedEvent, load_artifact
from .contracts.contract import Contract, TxResult, balance_changes
from .contracts.tx import ContractRevertedError
