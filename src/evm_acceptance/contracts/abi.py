"""
ABI Loader and codec - compiled artifacts, calldata, events, revert data.

Artifacts are read from an external build, never compiled here:
  Hardhat: artifacts/contracts/<Name>.sol/<Name>.json
  Foundry: out/<Name>.sol/<Name>.json

Encoding uses eth-abi; hashing uses eth-hash (Keccak-256).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_hash.auto import keccak

# Error(string) and Panic(uint256), the two revert payloads solc emits
ERROR_SELECTOR = bytes.fromhex("08c379a0")
PANIC_SELECTOR = bytes.fromhex("4e487b71")


class ArtifactNotFoundError(FileNotFoundError):
    """Raised when a compiled artifact cannot be located."""


@dataclass(frozen=True)
class DecodedEvent:
    """A log entry decoded against an ABI event."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)
    address: Optional[str] = None


# ---------------------------------------------------------------------------
# Hashing / addresses
# ---------------------------------------------------------------------------

def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def hex_to_bytes(data: str) -> bytes:
    return bytes.fromhex(data[2:] if data.startswith("0x") else data)


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

def find_artifacts_dir(start: Optional[Path] = None) -> Path:
    """
    Locate the compiled artifacts directory.

    EVM_ARTIFACTS_DIR wins; otherwise searches from ``start`` (default: cwd)
    upward for Hardhat's artifacts/contracts or Foundry's out.
    """
    override = os.environ.get("EVM_ARTIFACTS_DIR")
    if override:
        return Path(override)

    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        for candidate in (parent / "artifacts" / "contracts", parent / "out"):
            if candidate.is_dir():
                return candidate
    raise ArtifactNotFoundError(
        "Cannot find artifacts/contracts/ or out/. "
        "Compile the contracts (npx hardhat compile / forge build) first."
    )


def load_artifact(contract_name: str, artifacts_dir: Optional[Path] = None) -> dict[str, Any]:
    """
    Load ABI and deployment bytecode for a contract.

    Args:
        contract_name: Contract name (e.g., "OpenZeppelinGLDToken")
        artifacts_dir: Artifacts root (default: find_artifacts_dir())

    Returns:
        Dict with "abi" (list) and "bytecode" (0x-prefixed hex, may be "0x")

    Raises:
        ArtifactNotFoundError: If the artifact file is missing
    """
    root = artifacts_dir or find_artifacts_dir()
    path = root / f"{contract_name}.sol" / f"{contract_name}.json"

    if not path.exists():
        # Hardhat nests sources by directory (contracts/tokens/Foo.sol/...)
        matches = sorted(root.rglob(f"{contract_name}.sol/{contract_name}.json"))
        if not matches:
            raise ArtifactNotFoundError(f"Artifact not found for {contract_name} under {root}")
        path = matches[0]

    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    bytecode = artifact.get("bytecode", "")
    if isinstance(bytecode, dict):  # Foundry
        bytecode = bytecode.get("object", "")
    if bytecode and not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode

    return {"abi": artifact["abi"], "bytecode": bytecode or "0x"}


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

def _canonical_type(param: dict[str, Any]) -> str:
    typ = param["type"]
    if typ.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def _types(params: list[dict[str, Any]]) -> list[str]:
    return [_canonical_type(p) for p in params]


def find_entry(abi: list, name: str, kind: str = "function") -> dict[str, Any]:
    """Find the first ABI entry of ``kind`` called ``name``."""
    for entry in abi:
        if entry.get("type") == kind and entry.get("name") == name:
            return entry
    raise ValueError(f"{kind.capitalize()} {name} not found in ABI")


def signature(entry: dict[str, Any]) -> str:
    return f"{entry['name']}({','.join(_types(entry.get('inputs', [])))})"


def function_selector(entry: dict[str, Any]) -> bytes:
    """First 4 bytes of keccak256 of the canonical signature."""
    return keccak256(signature(entry).encode("utf-8"))[:4]


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_entry(abi, function_name)
    input_types = _types(func.get("inputs", []))
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} arguments, got {len(args)}"
        )

    encoded_args = encode(input_types, args) if args else b""
    return "0x" + function_selector(func).hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for no outputs, the value for one output, else a tuple
    """
    func = find_entry(abi, function_name)
    output_types = _types(func.get("outputs", []))
    if not output_types:
        return None

    decoded = decode(output_types, hex_to_bytes(data))
    if len(decoded) == 1:
        return decoded[0]
    return decoded


def encode_constructor_args(abi: list, args: list) -> str:
    """ABI-encode constructor arguments as bare hex (no 0x)."""
    constructor = next((e for e in abi if e.get("type") == "constructor"), None)
    if constructor is None:
        if args:
            raise ValueError("Constructor not found in ABI, but constructor args were provided.")
        return ""
    return encode(_types(constructor.get("inputs", [])), args).hex()


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

def event_topic(entry: dict[str, Any]) -> str:
    """topic0 of an event: 0x-prefixed keccak256 of its signature."""
    return "0x" + keccak256(signature(entry).encode("utf-8")).hex()


def decode_event_log(abi: list, log: dict[str, Any]) -> Optional[DecodedEvent]:
    """
    Decode a receipt log against the events in ``abi``.

    Returns None if topic0 matches no event.  Indexed dynamic values
    (strings, bytes, arrays) are only available as their topic hash.
    """
    topics = log.get("topics") or []
    if not topics:
        return None

    for entry in abi:
        if entry.get("type") != "event" or entry.get("anonymous"):
            continue
        if event_topic(entry).lower() != topics[0].lower():
            continue

        inputs = entry.get("inputs", [])
        indexed = [i for i in inputs if i.get("indexed")]
        plain = [i for i in inputs if not i.get("indexed")]

        plain_values = decode(_types(plain), hex_to_bytes(log.get("data", "0x"))) if plain else ()

        args: dict[str, Any] = {}
        indexed_iter = iter(topics[1:])
        plain_iter = iter(plain_values)
        for position, inp in enumerate(inputs):
            key = inp.get("name") or str(position)
            if inp.get("indexed"):
                raw = hex_to_bytes(next(indexed_iter))
                typ = _canonical_type(inp)
                if typ in ("string", "bytes") or typ.endswith("]") or typ.startswith("("):
                    args[key] = "0x" + raw.hex()
                else:
                    args[key] = decode([typ], raw)[0]
            else:
                args[key] = next(plain_iter)

        return DecodedEvent(name=entry["name"], args=args, address=log.get("address"))

    return None


# ---------------------------------------------------------------------------
# Revert data
# ---------------------------------------------------------------------------

def decode_revert_reason(data: Any, abi: Optional[list] = None) -> Optional[str]:
    """
    Turn revert data into a readable reason.

    Understands Error(string), Panic(uint256) and, given ``abi``, custom
    errors.  Returns None for anything else.
    """
    if isinstance(data, dict):  # some nodes nest it: {"data": "0x..."}
        data = data.get("data")
    if not isinstance(data, str) or not data.startswith("0x") or len(data) < 10:
        return None

    try:
        raw = hex_to_bytes(data)
    except ValueError:
        return None
    selector, payload = raw[:4], raw[4:]

    try:
        if selector == ERROR_SELECTOR:
            return decode(["string"], payload)[0]
        if selector == PANIC_SELECTOR:
            code = decode(["uint256"], payload)[0]
            return f"panic code 0x{code:02x}"

        for entry in abi or []:
            if entry.get("type") == "error" and function_selector(entry) == selector:
                values = decode(_types(entry.get("inputs", [])), payload)
                return f"{entry['name']}({', '.join(str(v) for v in values)})"
    except DecodingError:
        # known selector, truncated or malformed payload
        return None

    return None
