"""
WSSlots Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures exception handling, and provides a test-friendly application
factory.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import settings
from .core.errors import slot_edit_error_handler, unhandled_exception_handler
from .slots.errors import SlotEditError

from .api import (
    health_routes,
    slot_routes,
)


logger = logging.getLogger("wsslots.app")


# ---------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup validation and shutdown logging.
    """
    logger.info("Starting wsslots")

    if not settings.jwt_secret.get_secret_value():
        logger.warning("jwt_secret is not configured; authenticated routes will fail")

    logger.info(
        "Defined slots: %s; semantic slots: %s",
        ", ".join(settings.defined_slots) or "(none)",
        ", ".join(settings.semantic_slots) or "(none)",
    )

    yield

    logger.info("Shutting down wsslots")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="wsslots",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(SlotEditError, slot_edit_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(slot_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()


def run() -> None:
    """Serve the default application with uvicorn."""
    import uvicorn

    uvicorn.run("wsslots.main:app", host=settings.host, port=settings.port)
