import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import assets, events, health, swaps
from .config import Settings, settings
from .core.ledger import AssetLedger, InMemoryAssetLedger
from .core.swap import EventLog, InMemorySwapStore, SwapError, SwapRegistry, SwapStore
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def create_app(
    ledger: Optional[AssetLedger] = None,
    store: Optional[SwapStore] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API with its own registry, store, ledger and event log.

    Each call returns an independent app; tests get fresh state per app.
    """
    config = config or settings

    if ledger is None:
        if config.has_ledger_seed:
            ledger = InMemoryAssetLedger.from_file(config.ledger_seed_path)
        else:
            ledger = InMemoryAssetLedger()

    registry = SwapRegistry(
        store=store or InMemorySwapStore(),
        ledger=ledger,
        events=EventLog(),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Swap registry ready (ledger={ledger.name})")
        yield
        logger.info("Swap registry shutting down")

    app = FastAPI(
        title="NFT Swap Registry",
        description="Atomic two-party NFT swaps without a custodian",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.registry = registry
    app.state.ledger = ledger

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SwapError)
    async def swap_error_handler(request: Request, exc: SwapError) -> JSONResponse:
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    app.include_router(health.router, tags=["Health"])
    app.include_router(swaps.router)
    app.include_router(events.router)
    app.include_router(assets.router)

    @app.get("/")
    async def root():
        """Root endpoint with basic info"""
        return {
            "name": "NFT Swap Registry",
            "version": "0.1.0",
            "docs": "/docs",
            "health": "/healthz",
        }

    return app


app = create_app()


def run() -> None:
    import uvicorn

    setup_logging(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
