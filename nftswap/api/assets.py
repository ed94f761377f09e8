from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..core.ledger import AssetLedger
from ..core.swap import AssetRef
from .deps import get_ledger

router = APIRouter(prefix="/assets", tags=["Assets"])


class AssetOwnerResponse(BaseModel):
    contract: str
    token_id: str = Field(..., alias="tokenId")
    owner: Optional[str] = None

    class Config:
        populate_by_name = True


@router.get("/{contract}/{token_id}/owner", response_model=AssetOwnerResponse)
async def get_asset_owner(
    contract: str,
    token_id: str,
    ledger: AssetLedger = Depends(get_ledger),
):
    """Current owner according to the asset ledger (null if unknown)."""
    asset = AssetRef.parse(contract, token_id)
    owner = await ledger.current_owner(asset)
    return AssetOwnerResponse(contract=asset.contract, tokenId=str(asset.token_id), owner=owner)
