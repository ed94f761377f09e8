"""
Swap Store

Repository for swap records. The registry is handed a store instance; the
in-memory implementation lives as long as the app (or test) that created it.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .errors import DuplicateSwap, UnknownSwap
from .models import SwapRecord, SwapStatus


class SwapStore(ABC):
    """Keyed table of swap id -> SwapRecord."""

    @abstractmethod
    async def get(self, swap_id: str) -> Optional[SwapRecord]:
        """Return a copy of the record, or None."""
        pass

    @abstractmethod
    async def add(self, record: SwapRecord) -> None:
        """Insert a new record. Raises DuplicateSwap if the id is taken."""
        pass

    @abstractmethod
    async def update(self, record: SwapRecord) -> None:
        """Replace an existing record. Raises UnknownSwap if missing."""
        pass

    @abstractmethod
    async def delete(self, swap_id: str) -> None:
        """Remove a record. Raises UnknownSwap if missing."""
        pass

    @abstractmethod
    async def list(
        self,
        proposer: Optional[str] = None,
        status: Optional[SwapStatus] = None,
    ) -> List[SwapRecord]:
        """Return copies of matching records in creation order."""
        pass

    async def counts(self) -> Dict[str, int]:
        """Number of stored records per status."""
        result = {s.value: 0 for s in SwapStatus}
        for record in await self.list():
            result[record.status.value] += 1
        return result


class InMemorySwapStore(SwapStore):
    """Dict-backed store. Hands out copies so stored records are never aliased."""

    def __init__(self):
        self._records: Dict[str, SwapRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    async def get(self, swap_id: str) -> Optional[SwapRecord]:
        record = self._records.get(swap_id)
        return record.copy() if record else None

    async def add(self, record: SwapRecord) -> None:
        if record.swap_id in self._records:
            raise DuplicateSwap(f"Swap {record.swap_id} already exists", swap_id=record.swap_id)
        self._records[record.swap_id] = record.copy()

    async def update(self, record: SwapRecord) -> None:
        if record.swap_id not in self._records:
            raise UnknownSwap(f"Swap {record.swap_id} not found", swap_id=record.swap_id)
        self._records[record.swap_id] = record.copy()

    async def delete(self, swap_id: str) -> None:
        if swap_id not in self._records:
            raise UnknownSwap(f"Swap {swap_id} not found", swap_id=swap_id)
        del self._records[swap_id]

    async def list(
        self,
        proposer: Optional[str] = None,
        status: Optional[SwapStatus] = None,
    ) -> List[SwapRecord]:
        matches = [
            r.copy()
            for r in self._records.values()
            if (proposer is None or r.proposer == proposer)
            and (status is None or r.status == status)
        ]
        return sorted(matches, key=lambda r: r.created_at)
