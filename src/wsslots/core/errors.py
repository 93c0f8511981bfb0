"""
Global Error Handling

Application-wide exception handlers for the slot editing API.

Design Goals
------------
- Never leak internal exception details to clients
- Slot edit failures reach the client as a stable (code, message) pair
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

from ..slots.errors import SlotEditError

logger = logging.getLogger("wsslots.errors")


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def slot_edit_error_handler(
    request: Request,
    exc: SlotEditError,
) -> JSONResponse:
    """
    Render an expected slot edit failure as a 400 response.

    The payload carries the error's machine code in ``error`` and its
    human-readable message in ``detail``.
    """
    payload: Dict[str, Any] = {
        "error": exc.code,
        "detail": exc.message,
    }

    return JSONResponse(
        status_code=400,
        content=payload,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.
    """

    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
