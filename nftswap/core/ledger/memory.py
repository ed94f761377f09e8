"""
In-memory asset ledger.

Used by the test-suite and for local runs. Every operation checks and mutates
without awaiting anything in between, so each transfer is atomic with respect
to the event loop.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ...services.address import is_zero_address, normalize_address
from ..swap.errors import NotOwner, TransferRejected
from ..swap.models import AssetRef
from .base import AssetLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferRecord:
    asset: AssetRef
    sender: str
    recipient: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryAssetLedger(AssetLedger):
    """Dict-backed ownership table with per-collection receiver restrictions."""

    name = "memory"

    def __init__(self, owners: Optional[Dict[AssetRef, str]] = None):
        self._owners: Dict[AssetRef, str] = {}
        # contract -> accounts that may not receive tokens of that contract;
        # the None key applies to every contract
        self._disabled_receivers: Dict[Optional[str], Set[str]] = {}
        self.history: List[TransferRecord] = []

        for asset, owner in (owners or {}).items():
            self.assign(asset, owner)

    def assign(self, asset: AssetRef, owner: str) -> None:
        """Seed ownership of an asset. Not a transfer: nothing is checked or recorded."""
        self._owners[asset] = normalize_address(owner)

    def disable_receiver(self, account: str, contract: Optional[str] = None) -> None:
        """Refuse transfers to ``account``, for one collection or for all of them."""
        key = normalize_address(contract) if contract else None
        self._disabled_receivers.setdefault(key, set()).add(normalize_address(account))

    def enable_receiver(self, account: str, contract: Optional[str] = None) -> None:
        key = normalize_address(contract) if contract else None
        self._disabled_receivers.get(key, set()).discard(normalize_address(account))

    def can_receive(self, account: str, asset: AssetRef) -> bool:
        if is_zero_address(account):
            return False
        for key in (None, asset.contract):
            if account in self._disabled_receivers.get(key, set()):
                return False
        return True

    async def current_owner(self, asset: AssetRef) -> Optional[str]:
        return self._owners.get(asset)

    async def transfer(self, asset: AssetRef, sender: str, recipient: str) -> None:
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)

        owner = self._owners.get(asset)
        if owner is None or owner != sender:
            raise NotOwner(f"{sender} does not own {asset}")
        if recipient == sender:
            raise TransferRejected(f"{asset}: sender and recipient are the same account")
        if not self.can_receive(recipient, asset):
            raise TransferRejected(f"{recipient} cannot receive tokens of {asset.contract}")

        self._owners[asset] = recipient
        self.history.append(TransferRecord(asset=asset, sender=sender, recipient=recipient))
        logger.debug(f"Transferred {asset} from {sender} to {recipient}")

    async def health_check(self) -> dict:
        return {"status": "healthy", "ledger": self.name, "assets": len(self._owners)}

    @classmethod
    def from_file(cls, path: Path) -> "InMemoryAssetLedger":
        """
        Build a ledger from a JSON seed file.

        Format::

            {
              "owners": [{"contract": "0x..", "token_id": 1, "owner": "0x.."}],
              "disabled_receivers": [{"account": "0x..", "contract": "0x.."}]
            }

        ``contract`` is optional in ``disabled_receivers``.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        ledger = cls()
        for asset, owner in _parse_owners(data.get("owners", [])):
            ledger.assign(asset, owner)
        for entry in data.get("disabled_receivers", []):
            ledger.disable_receiver(entry["account"], entry.get("contract"))

        logger.info(f"Seeded in-memory ledger from {path}: {len(ledger._owners)} assets")
        return ledger


def _parse_owners(entries: Iterable[dict]) -> Iterable[Tuple[AssetRef, str]]:
    for entry in entries:
        yield AssetRef.parse(entry["contract"], entry["token_id"]), entry["owner"]
