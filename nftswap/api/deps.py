"""
FastAPI dependencies: app-scoped services and the calling account.
"""

from fastapi import HTTPException, Request, status

from ..config import Settings
from ..core.ledger import AssetLedger
from ..core.swap import SwapRegistry


def get_registry(request: Request) -> SwapRegistry:
    return request.app.state.registry


def get_ledger(request: Request) -> AssetLedger:
    return request.app.state.ledger


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_caller(request: Request) -> str:
    """
    Account address of the caller, taken from the authentication header.

    Raises HTTPException 401 if the header is missing. Address validation is
    left to the registry so that malformed values surface as INVALID_REQUEST.
    """
    header = get_settings(request).caller_header
    caller = request.headers.get(header)
    if not caller or not caller.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {header} header",
        )
    return caller.strip()
