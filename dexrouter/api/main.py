"""FastAPI application serving router quotes."""

import json
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dexrouter import __version__
from dexrouter.api.endpoints import router, set_router
from dexrouter.api.wiring import build_sim_router
from dexrouter.config import RouterConfig
from dexrouter.errors import (
    ExternalCallFailure,
    InvariantViolation,
    RouterError,
    SlippageViolation,
    ValidationError,
    category,
)
from dexrouter.logging import configure_logging

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("ROUTER_HOST", "0.0.0.0")
PORT = int(os.environ.get("ROUTER_PORT", "8000"))
DEBUG = os.environ.get("ROUTER_DEBUG", "false").lower() in ("true", "1", "yes")
# Optional JSON file describing tokens and pools to serve quotes for
POOLS_FILE = os.environ.get("ROUTER_POOLS_FILE")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and load ROUTER_POOLS_FILE, if set, at startup."""
    config = RouterConfig.from_env()
    configure_logging(config)
    if POOLS_FILE:
        load_pools_file(POOLS_FILE, config)
    yield


app = FastAPI(
    lifespan=lifespan,
    title="dexrouter",
    description="Multi-hop swap and liquidity quotes over two-asset pools",
    version=__version__,
)

app.include_router(router)


def error_status(err: RouterError) -> int:
    """HTTP status for a router error category."""
    if isinstance(err, (ValidationError, SlippageViolation)):
        return 422
    if isinstance(err, ExternalCallFailure):
        return 502
    if isinstance(err, InvariantViolation):
        return 500
    return 400


@app.exception_handler(RouterError)
async def router_error_handler(_request: Request, err: RouterError) -> JSONResponse:
    status = error_status(err)
    log = logger.error if status >= 500 else logger.info
    log("quote_rejected", error=type(err).__name__, category=category(err), detail=str(err))
    return JSONResponse(
        status_code=status,
        content={"error": type(err).__name__, "category": category(err), "detail": str(err)},
    )


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def load_pools_file(path: str, config: RouterConfig) -> None:
    """Serve quotes for the pools described in a JSON file."""
    with open(Path(path)) as f:
        layout = json.load(f)
    set_router(build_sim_router(layout, config))
    logger.info("pools_loaded", path=path, pools=len(layout.get("pools", [])))


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - ROUTER_HOST: Host to bind to (default: 0.0.0.0)
    - ROUTER_PORT: Port to bind to (default: 8000)
    - ROUTER_DEBUG: Enable debug/reload mode (default: false)
    - ROUTER_POOLS_FILE: JSON pool description to serve (default: none, quotes return 503)
    - ROUTER_* settings read by RouterConfig.from_env
    """
    uvicorn.run(
        "dexrouter.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
