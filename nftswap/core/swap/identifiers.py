"""
Swap identifier derivation.

id = keccak256(abi.encode(proposer, contractA, tokenIdA, contractB, tokenIdB))
"""

from __future__ import annotations

import re

from eth_utils import keccak

from .models import AssetRef

_SWAP_ID_RE = re.compile(r"^0x[a-f0-9]{64}$")


def _strip_0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def _encode_uint(value: int) -> str:
    if value < 0:
        raise ValueError("Value must be non-negative")
    return hex(value)[2:].rjust(64, "0")


def _encode_address(address: str) -> str:
    addr = _strip_0x(address).lower()
    if len(addr) != 40:
        raise ValueError(f"Invalid address length: {address}")
    return addr.rjust(64, "0")


def _encode_asset(asset: AssetRef) -> str:
    return _encode_address(asset.contract) + _encode_uint(asset.token_id)


def derive_swap_id(proposer: str, asset_a: AssetRef, asset_b: AssetRef) -> str:
    """Deterministic identifier for a proposal.

    The same proposer offering the same ordered pair always gets the same id;
    swapping the order of the assets yields a different one.
    """
    payload = _encode_address(proposer) + _encode_asset(asset_a) + _encode_asset(asset_b)
    return "0x" + keccak(hexstr=payload).hex()


def normalize_swap_id(swap_id: str) -> str:
    """Lower-case a swap id, raising ValueError if it isn't 32 bytes of hex."""
    candidate = (swap_id or "").strip().lower()
    if not candidate.startswith("0x"):
        candidate = "0x" + candidate
    if not _SWAP_ID_RE.fullmatch(candidate):
        raise ValueError(f"Invalid swap id: {swap_id!r}")
    return candidate
