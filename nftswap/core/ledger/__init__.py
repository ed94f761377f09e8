"""
Asset ledger collaborators the swap registry settles against.
"""

from .base import AssetLedger
from .memory import InMemoryAssetLedger, TransferRecord

__all__ = [
    "AssetLedger",
    "InMemoryAssetLedger",
    "TransferRecord",
]
