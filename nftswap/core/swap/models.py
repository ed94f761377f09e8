"""
Swap Models

Asset references, swap records, and the notifications emitted when a swap
changes state.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from ...services.address import normalize_address
from .errors import InvalidRequest

MAX_TOKEN_ID = 2**256 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SwapStatus(str, Enum):
    """Lifecycle of a stored swap. Cancelled swaps are deleted, not stored."""

    OPEN = "open"
    COMPLETED = "completed"


class SwapEventType(str, Enum):
    """Notifications appended to the event log."""

    PROPOSED = "SwapProposed"
    EXECUTED = "SwapExecuted"


@dataclass(frozen=True)
class AssetRef:
    """A single non-fungible token: its collection contract and token id."""

    contract: str
    token_id: int

    @classmethod
    def parse(cls, contract: str, token_id: Union[int, str]) -> "AssetRef":
        """Validate and normalize raw input into an AssetRef.

        Token ids may be given as ints, decimal strings, or 0x-prefixed hex.

        Raises:
            InvalidRequest: on a malformed contract address or token id
        """
        try:
            normalized = normalize_address(contract)
        except ValueError as e:
            raise InvalidRequest(f"Invalid asset contract: {e}") from e

        if isinstance(token_id, bool):
            raise InvalidRequest(f"Invalid token id: {token_id!r}")
        if isinstance(token_id, str):
            raw = token_id.strip()
            try:
                token_id = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
            except ValueError as e:
                raise InvalidRequest(f"Invalid token id: {raw!r}") from e
        if not isinstance(token_id, int) or not 0 <= token_id <= MAX_TOKEN_ID:
            raise InvalidRequest(f"Token id out of range: {token_id!r}")

        return cls(contract=normalized, token_id=token_id)

    def to_dict(self) -> Dict[str, Any]:
        # Token ids can exceed JSON's safe integer range
        return {"contract": self.contract, "tokenId": str(self.token_id)}

    def __str__(self) -> str:
        return f"{self.contract}#{self.token_id}"


@dataclass
class SwapRecord:
    """One proposed or completed exchange."""

    swap_id: str
    asset_a: AssetRef           # given up by the proposer
    asset_b: AssetRef           # received by the proposer
    proposer: str
    acceptor: Optional[str] = None
    status: SwapStatus = SwapStatus.OPEN

    created_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status == SwapStatus.OPEN

    @property
    def is_completed(self) -> bool:
        return self.status == SwapStatus.COMPLETED

    def complete(self, acceptor: str) -> "SwapRecord":
        """Return the completed copy of this record. The original is untouched."""
        return replace(
            self,
            acceptor=acceptor,
            status=SwapStatus.COMPLETED,
            completed_at=_utcnow(),
        )

    def copy(self) -> "SwapRecord":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "swapId": self.swap_id,
            "assetA": self.asset_a.to_dict(),
            "assetB": self.asset_b.to_dict(),
            "proposer": self.proposer,
            "acceptor": self.acceptor,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass(frozen=True)
class SwapEvent:
    """An entry in the append-only notification log."""

    sequence: int
    type: SwapEventType
    swap_id: str
    timestamp: datetime = field(default_factory=_utcnow)

    # Only set for SwapProposed
    proposer: Optional[str] = None
    asset_a: Optional[AssetRef] = None
    asset_b: Optional[AssetRef] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "sequence": self.sequence,
            "type": self.type.value,
            "swapId": self.swap_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.type == SwapEventType.PROPOSED:
            data["proposer"] = self.proposer
            data["assetA"] = self.asset_a.to_dict() if self.asset_a else None
            data["assetB"] = self.asset_b.to_dict() if self.asset_b else None
        return data
