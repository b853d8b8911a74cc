"""Per-request timing: one log line and an ``X-Response-Time`` header."""
from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Probes hit these every few seconds.
_QUIET_PATHS = frozenset({"/api/health", "/readyz"})


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Response-Time"] = f"{elapsed_ms:.1f}ms"

        if response.status_code >= 500:
            logger.warning(
                "%s %s failed with %s after %.1fms",
                request.method, request.url.path, response.status_code, elapsed_ms,
            )
        elif request.url.path not in _QUIET_PATHS:
            logger.info(
                "%s %s -> %s in %.1fms",
                request.method, request.url.path, response.status_code, elapsed_ms,
            )
        return response
