from __future__ import annotations

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..clients.ledger import LedgerError, UnknownAsset
from ..errors import MarketplaceError
from ..logging import configure_logging, get_logger, request_id_middleware
from .routes import events, export, health, listings

_log = get_logger()


async def _marketplace_error(_request: Request, exc: MarketplaceError) -> JSONResponse:
    _log.info("marketplace_error", error=exc.code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": exc.detail})


async def _ledger_error(_request: Request, exc: Exception) -> JSONResponse:
    status = 404 if isinstance(exc, UnknownAsset) else 409
    _log.info("ledger_error", error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status, content={"error": type(exc).__name__, "detail": str(exc)})


async def _upstream_error(_request: Request, exc: httpx.HTTPError) -> JSONResponse:
    _log.warning("upstream_error", error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=502, content={"error": "UpstreamUnavailable", "detail": str(exc)})


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Bazaar", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_id_middleware)
    app.add_exception_handler(MarketplaceError, _marketplace_error)  # type: ignore[arg-type]
    app.add_exception_handler(LedgerError, _ledger_error)
    app.add_exception_handler(httpx.HTTPError, _upstream_error)  # type: ignore[arg-type]

    app.include_router(health.router)
    app.include_router(listings.router)
    app.include_router(events.router)
    app.include_router(export.router)

    return app


app = create_app()
