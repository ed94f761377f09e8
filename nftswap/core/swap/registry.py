"""
Swap Registry

Owns the swap lifecycle: propose creates an open record, accept settles both
transfers and completes it, cancel deletes an open record. All checks happen
before any state is touched, and every failure leaves the stored record as it
was.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, List, Optional

from ...services.address import normalize_address
from .errors import (
    AlreadyAccepted,
    AlreadyCompleted,
    AssetTransferError,
    DuplicateSwap,
    InvalidRequest,
    NotProposer,
    SelfAcceptance,
    SettlementError,
    SwapError,
    UnknownSwap,
)
from .events import EventLog
from .identifiers import derive_swap_id, normalize_swap_id
from .models import AssetRef, SwapEvent, SwapRecord, SwapStatus
from .store import SwapStore

if TYPE_CHECKING:
    from ..ledger.base import AssetLedger


class SwapRegistry:
    """
    Propose / accept / cancel state machine over an injected store and ledger.

    Concurrency:
    - Mutations of one swap id run under that id's lock.
    - An accept claims the swap before waiting on the lock, so a second
      acceptor arriving while settlement is in flight gets AlreadyAccepted
      instead of queueing behind it. The claim is never written to the store.
    - The transfer phase of every accept runs under a single settlement lock,
      so a compensating transfer can't interleave with another settlement.
    """

    def __init__(
        self,
        store: SwapStore,
        ledger: "AssetLedger",
        events: Optional[EventLog] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.ledger = ledger
        self.events = events or EventLog()
        self.logger = logger or logging.getLogger(__name__)

        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}  # holders + waiters per id lock
        self._claims: Dict[str, str] = {}  # swap id -> acceptor with accept in flight
        self._settlement_lock = asyncio.Lock()

    @asynccontextmanager
    async def _locked(self, swap_id: str) -> AsyncIterator[None]:
        """
        Hold the lock for one swap id.

        A lock is dropped once nobody holds or waits on it. Anyone arriving
        while it is held or awaited shares the same lock object.
        """
        lock = self._locks.get(swap_id)
        if lock is None:
            lock = self._locks[swap_id] = asyncio.Lock()
        self._lock_users[swap_id] = self._lock_users.get(swap_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[swap_id] -= 1
            if self._lock_users[swap_id] == 0:
                del self._lock_users[swap_id]
                del self._locks[swap_id]

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def propose(self, asset_a: AssetRef, asset_b: AssetRef, caller: str) -> str:
        """
        Offer ``asset_a`` (held by caller) in exchange for ``asset_b``.

        Returns:
            The derived swap id

        Raises:
            InvalidRequest: malformed caller or identical assets
            DuplicateSwap: an open or completed record already uses the id
        """
        proposer = _account(caller)
        if asset_a == asset_b:
            raise InvalidRequest(f"Cannot swap {asset_a} for itself")

        swap_id = derive_swap_id(proposer, asset_a, asset_b)

        async with self._locked(swap_id):
            existing = await self.store.get(swap_id)
            if existing is not None:
                raise DuplicateSwap(
                    f"Swap {swap_id} already exists ({existing.status.value})",
                    swap_id=swap_id,
                )

            record = SwapRecord(
                swap_id=swap_id,
                asset_a=asset_a,
                asset_b=asset_b,
                proposer=proposer,
            )
            await self.store.add(record)
            self.logger.info(f"Swap {swap_id}: proposed by {proposer} ({asset_a} for {asset_b})")
            await self.events.swap_proposed(swap_id, proposer, asset_a, asset_b)

        return swap_id

    async def accept(self, swap_id: str, caller: str) -> SwapRecord:
        """
        Execute an open swap: asset A goes to the caller, asset B to the proposer.

        Returns:
            The completed record

        Raises:
            UnknownSwap, AlreadyCompleted, SelfAcceptance, AlreadyAccepted
            NotOwner / TransferRejected: surfaced from the ledger
            SettlementError: a partial settlement could not be reverted
        """
        swap_id = _swap_id(swap_id)
        acceptor = _account(caller)

        record = await self._require(swap_id)
        self._check_acceptable(record, acceptor)

        if swap_id in self._claims:
            raise AlreadyAccepted(f"Swap {swap_id} is already being accepted", swap_id=swap_id)
        self._claims[swap_id] = acceptor

        try:
            async with self._locked(swap_id):
                # The record may have been cancelled while we waited
                record = await self._require(swap_id)
                self._check_acceptable(record, acceptor)

                async with self._settlement_lock:
                    await self._settle(record, acceptor)

                completed = record.complete(acceptor)
                await self.store.update(completed)
                self.logger.info(f"Swap {swap_id}: executed ({record.proposer} <-> {acceptor})")
                await self.events.swap_executed(swap_id)
        except AssetTransferError as e:
            self.logger.warning(f"Swap {swap_id}: accept by {acceptor} failed: {e.message}")
            raise
        except SwapError:
            raise
        except Exception as e:
            self.logger.error(f"Swap {swap_id}: accept by {acceptor} failed: {e!r}")
            raise
        finally:
            self._claims.pop(swap_id, None)

        return completed

    async def cancel(self, swap_id: str, caller: str) -> None:
        """
        Withdraw an open offer. Only the proposer may cancel.

        Raises:
            UnknownSwap, NotProposer, AlreadyCompleted
        """
        swap_id = _swap_id(swap_id)
        account = _account(caller)

        # Unknown ids fail before a lock is created for them
        await self._require(swap_id)

        async with self._locked(swap_id):
            record = await self._require(swap_id)
            if account != record.proposer:
                raise NotProposer(f"Only the proposer may cancel swap {swap_id}", swap_id=swap_id)
            if record.is_completed:
                raise AlreadyCompleted(f"Swap {swap_id} is already completed", swap_id=swap_id)

            await self.store.delete(swap_id)

        self.logger.info(f"Swap {swap_id}: cancelled by {account}")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_swap(self, swap_id: str) -> SwapRecord:
        """Latest committed record. Raises UnknownSwap if there is none."""
        return await self._require(_swap_id(swap_id))

    async def list_swaps(
        self,
        proposer: Optional[str] = None,
        status: Optional[SwapStatus] = None,
    ) -> List[SwapRecord]:
        return await self.store.list(
            proposer=_account(proposer) if proposer else None,
            status=status,
        )

    def list_events(self, since: int = 0, swap_id: Optional[str] = None) -> List[SwapEvent]:
        return self.events.list(since=since, swap_id=_swap_id(swap_id) if swap_id else None)

    def is_claimed(self, swap_id: str) -> bool:
        return _swap_id(swap_id) in self._claims

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _require(self, swap_id: str) -> SwapRecord:
        record = await self.store.get(swap_id)
        if record is None:
            raise UnknownSwap(f"Swap {swap_id} not found", swap_id=swap_id)
        return record

    def _check_acceptable(self, record: SwapRecord, acceptor: str) -> None:
        if record.is_completed:
            raise AlreadyCompleted(f"Swap {record.swap_id} is already completed", swap_id=record.swap_id)
        if acceptor == record.proposer:
            raise SelfAcceptance(f"Proposer cannot accept swap {record.swap_id}", swap_id=record.swap_id)
        if record.acceptor is not None:
            # Only reachable with a store shared by another writer
            raise AlreadyAccepted(f"Swap {record.swap_id} already has an acceptor", swap_id=record.swap_id)

    async def _settle(self, record: SwapRecord, acceptor: str) -> None:
        """Both transfers, in fixed order, or neither."""
        await self.ledger.transfer(record.asset_a, record.proposer, acceptor)

        try:
            await self.ledger.transfer(record.asset_b, acceptor, record.proposer)
        except BaseException as e:
            # Any failure of the second leg, cancellation included, returns asset A
            self.logger.info(
                f"Swap {record.swap_id}: second leg failed ({e!r}), returning {record.asset_a}"
            )
            try:
                await self.ledger.transfer(record.asset_a, acceptor, record.proposer)
            except Exception as comp_err:
                self.logger.critical(
                    f"Swap {record.swap_id}: could not return {record.asset_a} "
                    f"from {acceptor} to {record.proposer}: {comp_err}"
                )
                raise SettlementError(
                    f"Swap {record.swap_id} partially settled: {record.asset_a} is held by {acceptor}",
                    swap_id=record.swap_id,
                ) from comp_err
            raise


def _account(value: str) -> str:
    try:
        return normalize_address(value)
    except ValueError as e:
        raise InvalidRequest(f"Invalid account: {e}") from e


def _swap_id(value: str) -> str:
    try:
        return normalize_swap_id(value)
    except ValueError as e:
        raise InvalidRequest(str(e), swap_id=value) from e
