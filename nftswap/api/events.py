from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ..core.swap import SwapRegistry
from .deps import get_registry
from .swaps import AssetRefResponse

router = APIRouter(prefix="/events", tags=["Events"])


class SwapEventResponse(BaseModel):
    sequence: int
    type: str
    swap_id: str = Field(..., alias="swapId")
    timestamp: str
    proposer: Optional[str] = None
    asset_a: Optional[AssetRefResponse] = Field(None, alias="assetA")
    asset_b: Optional[AssetRefResponse] = Field(None, alias="assetB")

    class Config:
        populate_by_name = True


@router.get("", response_model=List[SwapEventResponse], response_model_exclude_none=True)
async def list_events(
    since: int = Query(0, ge=0, description="Return events with a sequence above this"),
    swap_id: Optional[str] = Query(None, alias="swapId"),
    registry: SwapRegistry = Depends(get_registry),
):
    """SwapProposed / SwapExecuted notifications, oldest first."""
    return [SwapEventResponse(**e.to_dict()) for e in registry.list_events(since=since, swap_id=swap_id)]
