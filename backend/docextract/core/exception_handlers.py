"""
exception_handlers.py
- Purpose: Convert AppError, request validation failures and anything unexpected
  into the same `{"error": {...}}` JSON shape.

Extraction outcomes never get here; the router maps those itself. What reaches
these handlers is an upload rejected while reading, a malformed request, or a bug.
"""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docextract.core import AppError, ErrorCode, ErrorReason
from docextract.core.request_context import get_context

logger = logging.getLogger("docextract.exceptions")


def _request_fields(request: Request) -> dict:
    return {"path": request.url.path, "method": request.method}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "app_error",
        extra={
            **_request_fields(request),
            "status_code": exc.status_code,
            "code": exc.code.value,
            "reason": exc.reason,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # e.g. multipart body without a `file` part
    err = AppError(
        code=ErrorCode.VALIDATION_ERROR,
        reason=ErrorReason.INVALID_INPUT.value,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details={"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]},
    )
    logger.info("request_invalid", extra={**_request_fields(request), "details": err.details})
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", extra=_request_fields(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": ErrorCode.INTERNAL_ERROR.value,
                "reason": ErrorReason.INTERNAL_ERROR.value,
                "request_id": get_context().get("request_id"),
            }
        },
    )
