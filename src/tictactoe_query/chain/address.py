from __future__ import annotations

from eth_utils import is_hex_address, to_checksum_address

from ..errors import AddressInvalidError


def parse_address(value: str) -> str:
    """
    Parse a 0x-prefixed 20-byte hex address.

    Letter case is not checked; the result is always in EIP-55
    checksum form.

    Returns:
        The checksummed address

    Raises:
        AddressInvalidError: If the value is not a valid address
    """
    if not isinstance(value, str):
        raise AddressInvalidError(f"Address must be a string, got {type(value).__name__}")

    candidate = value.strip()
    if not candidate.startswith(("0x", "0X")):
        raise AddressInvalidError(f"Address must be 0x-prefixed: {value!r}")
    candidate = "0x" + candidate[2:]
    if not is_hex_address(candidate):
        raise AddressInvalidError(
            f"Address must be 20 bytes of hex (40 hex digits): {value!r}"
        )

    return to_checksum_address(candidate)
