"""
Contracts - compiled artifacts, ABI codec, transactions and the Contract handle.

Artifacts come from an external Hardhat or Foundry build; nothing is
compiled here.
"""
