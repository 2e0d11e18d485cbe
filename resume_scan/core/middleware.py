"""Request correlation and access logging.

The correlation id comes from the configured request-id header when the
caller sends one, otherwise a fresh UUID4. It lives in a contextvar for the
duration of the request so retry and pipeline logs carry it, and is echoed
back on the response.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from resume_scan.core.logging import clear_request_id, set_request_id

logger = logging.getLogger("resume_scan.access")

DURATION_HEADER = "X-Request-Duration-ms"


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind a request id, time the request and emit one access record.

    Args:
        request: Incoming request; settings are read from ``app.state``.
        call_next: Next handler in the stack.

    Returns:
        The downstream response with the request-id and duration headers.
    """
    header_name = request.app.state.settings.log.request_id_header
    request_id = request.headers.get(header_name) or uuid.uuid4().hex
    set_request_id(request_id)
    started = time.perf_counter()
    status_code = 500
    try:
        response: Response = await call_next(request)
        status_code = response.status_code
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        # Emitted before the contextvar is cleared so the record is correlated
        logger.info(
            "http.request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": elapsed_ms,
            },
        )
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers[DURATION_HEADER] = f"{elapsed_ms:.2f}"
    return response
