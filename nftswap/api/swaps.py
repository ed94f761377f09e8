"""
Swap API Endpoints

Propose, accept, cancel and inspect swaps. The caller is whoever the
authentication header names.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ..core.swap import AssetRef, SwapRegistry, SwapStatus, normalize_swap_id
from .deps import get_registry, require_caller

router = APIRouter(prefix="/swaps", tags=["Swaps"])


# =============================================================================
# Request/Response Models
# =============================================================================


class AssetRefModel(BaseModel):
    contract: str = Field(..., description="Collection contract address")
    token_id: Union[int, str] = Field(..., alias="tokenId", description="Token id (decimal or 0x hex)")

    class Config:
        populate_by_name = True

    def to_asset(self) -> AssetRef:
        return AssetRef.parse(self.contract, self.token_id)


class ProposeSwapRequest(BaseModel):
    asset_a: AssetRefModel = Field(..., alias="assetA", description="Asset the caller gives up")
    asset_b: AssetRefModel = Field(..., alias="assetB", description="Asset the caller wants")

    class Config:
        populate_by_name = True


class ProposeSwapResponse(BaseModel):
    swap_id: str = Field(..., alias="swapId")

    class Config:
        populate_by_name = True


class AssetRefResponse(BaseModel):
    contract: str
    token_id: str = Field(..., alias="tokenId")

    class Config:
        populate_by_name = True


class SwapResponse(BaseModel):
    swap_id: str = Field(..., alias="swapId")
    asset_a: AssetRefResponse = Field(..., alias="assetA")
    asset_b: AssetRefResponse = Field(..., alias="assetB")
    proposer: str
    acceptor: Optional[str] = None
    status: SwapStatus
    created_at: str = Field(..., alias="createdAt")
    completed_at: Optional[str] = Field(None, alias="completedAt")

    class Config:
        populate_by_name = True


class CancelSwapResponse(BaseModel):
    swap_id: str = Field(..., alias="swapId")
    cancelled: bool = True

    class Config:
        populate_by_name = True


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=ProposeSwapResponse, status_code=status.HTTP_201_CREATED)
async def propose_swap(
    request: ProposeSwapRequest,
    caller: str = Depends(require_caller),
    registry: SwapRegistry = Depends(get_registry),
):
    """Offer assetA (owned by the caller) in exchange for assetB."""
    swap_id = await registry.propose(
        request.asset_a.to_asset(),
        request.asset_b.to_asset(),
        caller,
    )
    return ProposeSwapResponse(swapId=swap_id)


@router.get("", response_model=List[SwapResponse])
async def list_swaps(
    proposer: Optional[str] = Query(None, description="Filter by proposer address"),
    swap_status: Optional[SwapStatus] = Query(None, alias="status", description="open or completed"),
    registry: SwapRegistry = Depends(get_registry),
):
    records = await registry.list_swaps(proposer=proposer, status=swap_status)
    return [SwapResponse(**r.to_dict()) for r in records]


@router.get("/{swap_id}", response_model=SwapResponse)
async def get_swap(
    swap_id: str,
    registry: SwapRegistry = Depends(get_registry),
):
    record = await registry.get_swap(swap_id)
    return SwapResponse(**record.to_dict())


@router.post("/{swap_id}/accept", response_model=SwapResponse)
async def accept_swap(
    swap_id: str,
    caller: str = Depends(require_caller),
    registry: SwapRegistry = Depends(get_registry),
):
    """Execute the swap: both assets change hands or neither does."""
    record = await registry.accept(swap_id, caller)
    return SwapResponse(**record.to_dict())


@router.post("/{swap_id}/cancel", response_model=CancelSwapResponse)
async def cancel_swap(
    swap_id: str,
    caller: str = Depends(require_caller),
    registry: SwapRegistry = Depends(get_registry),
):
    """Withdraw an open offer. Proposer only."""
    await registry.cancel(swap_id, caller)
    return CancelSwapResponse(swapId=normalize_swap_id(swap_id))
