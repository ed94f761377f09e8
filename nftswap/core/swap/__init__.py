"""
Swap Registry Module

Atomic two-party NFT swaps: propose, accept, cancel, with an append-only
notification log.
"""

from .errors import (
    AlreadyAccepted,
    AlreadyCompleted,
    AssetTransferError,
    DuplicateSwap,
    InvalidRequest,
    NotOwner,
    NotProposer,
    SelfAcceptance,
    SettlementError,
    SwapError,
    TransferRejected,
    UnknownSwap,
)
from .events import EventLog
from .identifiers import derive_swap_id, normalize_swap_id
from .models import AssetRef, SwapEvent, SwapEventType, SwapRecord, SwapStatus
from .registry import SwapRegistry
from .store import InMemorySwapStore, SwapStore

__all__ = [
    # Registry
    "SwapRegistry",
    "derive_swap_id",
    "normalize_swap_id",
    # Models
    "AssetRef",
    "SwapRecord",
    "SwapStatus",
    "SwapEvent",
    "SwapEventType",
    # Storage & events
    "SwapStore",
    "InMemorySwapStore",
    "EventLog",
    # Errors
    "SwapError",
    "InvalidRequest",
    "DuplicateSwap",
    "UnknownSwap",
    "AlreadyCompleted",
    "AlreadyAccepted",
    "SelfAcceptance",
    "NotProposer",
    "AssetTransferError",
    "NotOwner",
    "TransferRejected",
    "SettlementError",
]
