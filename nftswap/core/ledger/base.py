from abc import ABC, abstractmethod
from typing import Optional

from ..swap.models import AssetRef


class AssetLedger(ABC):
    """
    Ownership ledger the swap registry settles against.

    Contract for implementations:
    - ``transfer`` either fully moves the asset or leaves no trace. It raises
      NotOwner when ``sender`` is not the current owner and TransferRejected
      when ``recipient`` may not receive the asset.
    - There is no ledger-level transaction spanning two transfers. The
      registry provides all-or-nothing settlement by compensating a completed
      first transfer when the second one fails.
    """

    name: str = "ledger"

    @abstractmethod
    async def transfer(self, asset: AssetRef, sender: str, recipient: str) -> None:
        """Move ``asset`` from ``sender`` to ``recipient``."""
        pass

    @abstractmethod
    async def current_owner(self, asset: AssetRef) -> Optional[str]:
        """Current owner of ``asset``, or None if the ledger doesn't know it."""
        pass

    async def health_check(self) -> dict:
        return {"status": "healthy", "ledger": self.name}
