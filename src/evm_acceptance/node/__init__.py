"""
Node - talking to an EVM development node.

Provides the JSON-RPC client (one POST per call, HTTP status check) and
typed eth_* helpers built on it.
"""
