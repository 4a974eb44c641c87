"""
Global exception handlers.

- ShortenerError -> its own status code, {"detail": message}
- RequestValidationError -> 400 with field-level details
- Exception (catch-all) -> 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortener_app.exceptions import InternalError, ShortenerError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        if isinstance(exc, InternalError):
            logger.error(
                "%s on %s: %s", type(exc).__name__, request.url.path, exc.message,
                extra={"error_code": type(exc).__name__, "path": request.url.path},
            )
            detail = INTERNAL_ERROR_DETAIL
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
            detail = exc.message
        return JSONResponse(status_code=exc.http_status, content={"detail": detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": INTERNAL_ERROR_DETAIL},
        )
