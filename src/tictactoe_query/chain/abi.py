"""
ABI Loader - Loads and validates contract interface descriptions.

The TicTacToe ABI ships inside the package (contracts/tictactoe.abi.json).
Documents are checked against schemas/abi.schema.json before use, so a
malformed ABI fails before any network traffic.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import jsonschema
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_hash.auto import keccak

from ..errors import AbiFunctionNotFoundError, AbiInvalidError, ResultDecodeError

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
EMBEDDED_ABI_PATH = PACKAGE_ROOT / "contracts" / "tictactoe.abi.json"
ABI_SCHEMA_PATH = PACKAGE_ROOT / "schemas" / "abi.schema.json"


@lru_cache(maxsize=1)
def _abi_validator() -> jsonschema.Validator:
    with ABI_SCHEMA_PATH.open("r", encoding="utf-8") as f:
        schema = json.load(f)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(part) for part in error.path) or "<root>"
    return f"{location}: {error.message}"


def parse_abi(raw: Union[bytes, str], source: str = "<abi>") -> list[dict[str, Any]]:
    """
    Parse and validate an ABI document.

    Accepts either a bare ABI array or a compiler artifact object
    carrying the array under an ``"abi"`` key.

    Raises:
        AbiInvalidError: If the document is not JSON or fails the schema
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise AbiInvalidError(f"ABI {source} is not valid JSON: {exc}") from exc

    if isinstance(document, dict) and "abi" in document:
        document = document["abi"]

    errors = sorted(_abi_validator().iter_errors(document), key=lambda e: [str(p) for p in e.path])
    if errors:
        formatted = [_format_error(err) for err in errors]
        raise AbiInvalidError(
            f"ABI {source} failed schema validation: {formatted[0]}",
            errors=formatted,
        )
    return document


@lru_cache(maxsize=1)
def _embedded_abi() -> tuple[dict[str, Any], ...]:
    return tuple(parse_abi(EMBEDDED_ABI_PATH.read_bytes(), source=EMBEDDED_ABI_PATH.name))


def load_abi(path: Optional[Path] = None) -> list[dict[str, Any]]:
    """
    Load an ABI.

    Args:
        path: ABI file to read. Defaults to the embedded TicTacToe ABI.

    Returns:
        ABI as a list of dicts

    Raises:
        AbiInvalidError: If the file cannot be read or is malformed
    """
    if path is None:
        return list(_embedded_abi())

    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise AbiInvalidError(f"Cannot read ABI file {path}: {exc}") from exc
    return parse_abi(raw, source=str(path))


def function_names(abi: Sequence[dict[str, Any]]) -> list[str]:
    return [entry["name"] for entry in abi if entry.get("type") == "function"]


def find_function(abi: Sequence[dict[str, Any]], function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise AbiFunctionNotFoundError(f"Function {function_name} not found in ABI")


def _canonical_type(param: dict[str, Any]) -> str:
    # tuple[] -> (t1,t2)[]
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


def input_types(entry: dict[str, Any]) -> list[str]:
    return [_canonical_type(p) for p in entry.get("inputs", [])]


def output_types(entry: dict[str, Any]) -> list[str]:
    return [_canonical_type(p) for p in entry.get("outputs", [])]


def function_signature(entry: dict[str, Any]) -> str:
    return f"{entry['name']}({','.join(input_types(entry))})"


def function_selector(entry: dict[str, Any]) -> bytes:
    """First 4 bytes of Keccak-256 over the canonical signature."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(function_signature(entry).encode("utf-8"))[:4]


def encode_call(entry: dict[str, Any], args: Sequence[Any] = ()) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    types = input_types(entry)
    if len(args) != len(types):
        raise AbiInvalidError(
            f"{function_signature(entry)} takes {len(types)} argument(s), got {len(args)}"
        )
    try:
        encoded_args = encode(types, list(args)) if types else b""
    except EncodingError as exc:
        raise AbiInvalidError(f"Cannot encode arguments for {entry['name']}: {exc}") from exc
    return "0x" + function_selector(entry).hex() + encoded_args.hex()


def decode_result(entry: dict[str, Any], data: str) -> tuple[Any, ...]:
    """
    ABI-decode the return data of a function call.

    Raises:
        ResultDecodeError: If the data is not hex or does not match the outputs
    """
    types = output_types(entry)
    hex_body = data[2:] if data.startswith("0x") else data
    try:
        raw = bytes.fromhex(hex_body)
    except ValueError as exc:
        raise ResultDecodeError(f"Return data for {entry['name']} is not hex: {data!r}") from exc

    if types and not raw:
        raise ResultDecodeError(
            f"Empty return data for {entry['name']}; is a contract deployed at this address?"
        )

    try:
        return tuple(decode(types, raw))
    except DecodingError as exc:
        raise ResultDecodeError(
            f"Cannot decode return data for {entry['name']} as ({','.join(types)}): {exc}"
        ) from exc
