"""HTTP mapping for kitchen errors.

Protean's own handlers cover ValidationError (400) and ObjectNotFoundError
(404); InvalidTransitionError inherits the 400. Lost compare-and-swap races
become 409 with the current status so clients can re-read and retry.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from kitchen.errors import ConflictError

logger = structlog.get_logger(__name__)


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    logger.info("Write conflict", path=request.url.path, current_status=exc.current_status)
    return JSONResponse(
        status_code=409,
        content={"error": str(exc), "current_status": exc.current_status},
    )


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.info("Version conflict", path=request.url.path)
    return JSONResponse(
        status_code=409,
        content={"error": "Record changed concurrently. Please retry.", "current_status": None},
    )


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
