from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.ledger import AssetLedger
from ..core.swap import SwapRegistry
from .deps import get_ledger, get_registry

router = APIRouter()


@router.get("/healthz")
async def health_check(
    registry: SwapRegistry = Depends(get_registry),
    ledger: AssetLedger = Depends(get_ledger),
) -> Dict[str, Any]:
    """Liveness plus a summary of registry state."""
    ledger_status = await ledger.health_check()

    return {
        "status": "healthy" if ledger_status.get("status") == "healthy" else "degraded",
        "ledger": ledger_status,
        "swaps": await registry.store.counts(),
        "events": len(registry.events),
    }
