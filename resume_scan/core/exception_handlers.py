"""Global exception handlers for consistent error responses.

Every failure that escapes a route is translated here into a status code and
a sanitized JSON body. Upstream error text is logged but never returned.

Mapping:
- ValidationAppError → 400 (caller input)
- CapacityExhaustedError → 503 (try again later)
- any other AppError → 500 with a generic message
- unexpected Exception → 500 (safety net)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from resume_scan.core.errors import AppError, CapacityExhaustedError, ValidationAppError
from resume_scan.core.logging import get_request_id

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Analysis failed. See server logs."
OVERLOADED_MESSAGE = "The AI model is overloaded. Please click 'Scan' again in a minute."


def _status_for(exc: AppError) -> int:
    if isinstance(exc, ValidationAppError):
        return 400
    if isinstance(exc, CapacityExhaustedError):
        return 503
    return 500


def _public_message(exc: AppError, status_code: int) -> str:
    """Only caller-input messages are safe to echo verbatim."""
    if status_code == 400:
        return exc.message
    if status_code == 503:
        return OVERLOADED_MESSAGE
    return ANALYSIS_FAILED_MESSAGE


def _error_body(code: str, message: str) -> dict:
    return {
        "error": message,
        "code": code,
        "request_id": get_request_id(),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain errors raised anywhere in the pipeline.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse shaped ``{"error": str, "code": str, "request_id": str}``.
    """
    status_code = _status_for(exc)

    log = logger.warning if status_code < 500 else logger.error
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "error_type": type(exc).__name__,
            "status_code": status_code,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code, _public_message(exc, status_code)),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for errors that are not AppError subclasses."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=_error_body("internal_server_error", ANALYSIS_FAILED_MESSAGE),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on ``app``.

    Example:
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
