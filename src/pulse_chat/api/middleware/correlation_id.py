from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")

HEADER = "X-Request-ID"
_MAX_LEN = 64


def _incoming_id(request: Request) -> str | None:
    raw = request.headers.get(HEADER, "").strip()
    if not raw or len(raw) > _MAX_LEN or not raw.isprintable():
        return None
    return raw


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, echoed back and visible to log records.

    A well-formed client-supplied ``X-Request-ID`` is reused; anything else is
    replaced by a fresh uuid.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = _incoming_id(request) or uuid.uuid4().hex
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[HEADER] = request_id
        return response


class CorrelationIdFilter(logging.Filter):
    """Expose the current request id as ``%(request_id)s`` in log formats."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True
