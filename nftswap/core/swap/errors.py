"""
Swap Errors

Every rejection the registry or the asset ledger can surface to a caller.
Each error carries a stable ``code`` for API clients and the HTTP status it
maps to.
"""

from typing import Any, Dict, Optional


class SwapError(Exception):
    """Base class for caller-visible swap failures."""

    code: str = "SWAP_ERROR"
    http_status: int = 400

    def __init__(self, message: str, swap_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.swap_id = swap_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "detail": self.message,
            "swapId": self.swap_id,
        }


class InvalidRequest(SwapError):
    """Malformed account, asset reference, or asset pair."""

    code = "INVALID_REQUEST"
    http_status = 400


class DuplicateSwap(SwapError):
    """A record for the derived identifier already exists."""

    code = "DUPLICATE_SWAP"
    http_status = 409


class UnknownSwap(SwapError):
    """No record exists for the identifier."""

    code = "UNKNOWN_SWAP"
    http_status = 404


class AlreadyCompleted(SwapError):
    """The swap has already been executed."""

    code = "ALREADY_COMPLETED"
    http_status = 409


class AlreadyAccepted(SwapError):
    """Another acceptance of the swap is in flight."""

    code = "ALREADY_ACCEPTED"
    http_status = 409


class SelfAcceptance(SwapError):
    """The proposer tried to accept their own offer."""

    code = "SELF_ACCEPTANCE"
    http_status = 403


class NotProposer(SwapError):
    """Only the proposer may cancel an offer."""

    code = "NOT_PROPOSER"
    http_status = 403


class AssetTransferError(SwapError):
    """Base class for failures surfaced by the asset ledger."""

    code = "TRANSFER_FAILED"
    http_status = 422


class NotOwner(AssetTransferError):
    """The sender does not currently own the asset."""

    code = "NOT_OWNER"


class TransferRejected(AssetTransferError):
    """The recipient is not allowed to receive the asset."""

    code = "TRANSFER_REJECTED"


class SettlementError(SwapError):
    """
    A failed accept could not be compensated.

    Raised when the second transfer fails and moving the first asset back to
    the proposer fails as well. Requires manual reconciliation.
    """

    code = "SETTLEMENT_FAILED"
    http_status = 500
