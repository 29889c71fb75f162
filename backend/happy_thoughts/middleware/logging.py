"""
Happy Thoughts API — Request Logging Middleware
=================================================

What:  One access log line per HTTP request with status and duration.
Who:   Applied to every request; runs inside RequestIDMiddleware so the
       request ID is already set.

Logged:     method, path, matched route, thought id (likes), status,
            duration, request ID, client IP
Not logged: request bodies (thought text is user content)

Log level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
GET /health and CORS preflights are skipped.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from happy_thoughts.middleware.request_id import request_id_var

logger = logging.getLogger("happy_thoughts.access")

SKIPPED_PATHS = {"/health"}


def _is_preflight(request: Request) -> bool:
    return request.method == "OPTIONS" and "access-control-request-method" in request.headers


def _route_template(request: Request) -> Optional[str]:
    # Set by the router once it matched, e.g. "/thoughts/{thought_id}/like"
    return getattr(request.scope.get("route"), "path", None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log line for each thought API request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS or _is_preflight(request):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        route = _route_template(request) or request.url.path
        thought_id = request.path_params.get("thought_id")

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "route": route,
                "thought_id": thought_id,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
