from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from docextract.core.request_context import clear_context, set_context


logger = logging.getLogger("docextract.http")

REQUEST_ID_HEADER = "x-request-id"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags every log line of a request with one request id and times the call."""

    async def dispatch(self, request: Request, call_next):
        # The job host may pass its own id so its logs and ours line up
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_context(request_id=rid)
        route = {"method": request.method, "path": request.url.path}

        started = time.perf_counter()
        try:
            logger.info(
                "http.request",
                extra={
                    **route,
                    "content_type": request.headers.get("content-type"),
                    "content_length": request.headers.get("content-length"),
                },
            )
            response: Response = await call_next(request)
            logger.info(
                "http.response",
                extra={
                    **route,
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                },
            )
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            clear_context()
