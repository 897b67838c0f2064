"""Request logging and security header middleware."""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = "Internal Error"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and timing.

    Exceptions no handler claimed are logged and answered with a plaintext
    500 here, so the response still passes through the outer middleware.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        client_ip = request.client.host if request.client else "unknown"

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled exception: {e}",
                extra={"request_id": request_id, "path": request.url.path, "method": request.method},
                exc_info=e,
            )
            response = PlainTextResponse(INTERNAL_ERROR_BODY, status_code=500)
        duration = time.perf_counter() - start_time

        logger.info(
            f"{request.method} {request.url.path} from {client_ip} -> {response.status_code} "
            f"in {duration * 1000:.1f}ms",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": int(duration * 1000),
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        return response
