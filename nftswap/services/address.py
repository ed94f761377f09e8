"""Helpers for validating and normalizing account and collection addresses."""

from __future__ import annotations

import re
from functools import lru_cache

from eth_utils import to_checksum_address

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def is_valid_address(address: str | None) -> bool:
    if not address or not isinstance(address, str):
        return False
    return bool(_EVM_ADDRESS_RE.fullmatch(address.strip()))


@lru_cache(maxsize=1024)
def normalize_address(address: str) -> str:
    """Return the EIP-55 checksum form of an address.

    Case variants of the same address normalize to the same string, so the
    result is safe to use as a dictionary key or identity comparison.

    Raises:
        ValueError: if the value is not a 20-byte hex address.
    """

    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return to_checksum_address(address.strip())


def is_zero_address(address: str) -> bool:
    return normalize_address(address) == ZERO_ADDRESS


__all__ = [
    "ZERO_ADDRESS",
    "is_valid_address",
    "normalize_address",
    "is_zero_address",
]
