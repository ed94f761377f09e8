"""
Swap Event Log

Append-only, ordered record of successful proposals and executions.
"""

import logging
from typing import Any, Callable, Coroutine, List, Optional

from .models import AssetRef, SwapEvent, SwapEventType

EventCallback = Callable[[SwapEvent], Coroutine[Any, Any, None]]


class EventLog:
    """In-memory notification log with optional async subscribers."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._events: List[SwapEvent] = []
        self._subscribers: List[EventCallback] = []

    def __len__(self) -> int:
        return len(self._events)

    @property
    def last_sequence(self) -> int:
        return self._events[-1].sequence if self._events else 0

    def subscribe(self, callback: EventCallback) -> None:
        """Register a callback invoked after every append."""
        self._subscribers.append(callback)

    async def swap_proposed(
        self,
        swap_id: str,
        proposer: str,
        asset_a: AssetRef,
        asset_b: AssetRef,
    ) -> SwapEvent:
        return await self._append(
            SwapEvent(
                sequence=self.last_sequence + 1,
                type=SwapEventType.PROPOSED,
                swap_id=swap_id,
                proposer=proposer,
                asset_a=asset_a,
                asset_b=asset_b,
            )
        )

    async def swap_executed(self, swap_id: str) -> SwapEvent:
        return await self._append(
            SwapEvent(
                sequence=self.last_sequence + 1,
                type=SwapEventType.EXECUTED,
                swap_id=swap_id,
            )
        )

    def list(self, since: int = 0, swap_id: Optional[str] = None) -> List[SwapEvent]:
        """Events with sequence > since, oldest first."""
        return [
            e for e in self._events
            if e.sequence > since and (swap_id is None or e.swap_id == swap_id)
        ]

    async def _append(self, event: SwapEvent) -> SwapEvent:
        self._events.append(event)

        # The state change is already committed; a failing subscriber can't undo it
        for callback in self._subscribers:
            try:
                await callback(event)
            except Exception as e:
                self.logger.error(f"Event subscriber error for {event.type.value} {event.swap_id}: {e}")

        return event
