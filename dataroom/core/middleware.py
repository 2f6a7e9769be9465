"""
Request tracing middleware: request ids, timing headers and one access log
line per API call.
"""

import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from dataroom.core.logging_config import (
    logger,
    generate_request_id,
    set_request_id,
    set_user_id,
)


REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

# Health checks and API docs are not worth an access log line
UNLOGGED_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico")


def is_logged_path(path: str) -> bool:
    return path != "/" and not path.startswith(UNLOGGED_PREFIXES)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and logs method, path, status and duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.log_error_with_context(
                exc,
                context=f"{request.method} {request.url.path}",
                duration_ms=round(elapsed_ms, 2),
                client_ip=_client_ip(request),
            )
            raise
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}ms"
            if is_logged_path(request.url.path):
                logger.log_request(
                    request.method,
                    request.url.path,
                    response.status_code,
                    elapsed_ms,
                    client_ip=_client_ip(request),
                )
            return response
        finally:
            set_request_id("")
            set_user_id("")
