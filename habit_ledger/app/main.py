"""
Main entrypoint for the Habit Ledger API.

This module assembles the FastAPI application, sets up logging,
registers handlers for the ledger's typed errors and includes the
versioned routers.  ``create_app`` builds and configures the app,
which is then instantiated at module import time as ``app``::

    uvicorn habit_ledger.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.errors import LedgerError
from .core.logging_config import setup_logging
from .services.record_store import get_record_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Opening the store applies SQLite migrations before the first request.
    store = get_record_store()
    logger.info("%s %s started with %s", settings.project_name, settings.api_version, type(store).__name__)
    yield


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that later setup can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_exception_handler(LedgerError, ledger_error_handler)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
