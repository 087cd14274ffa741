"""
errors.py
- Purpose: AppError used across the engine and the HTTP surface for consistent errors.
- Pattern: raise AppError(...) in validators; the dispatcher turns it into a failed
  ExtractionResult, the HTTP handler turns it into a JSON response.
"""



from dataclasses import dataclass
from typing import Any

from fastapi import status as http_status
from docextract.core.error_codes import ErrorCode
from docextract.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __str__(self) -> str:
        return self.message if self.message else self.reason

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


class DocumentDecodeError(Exception):
    """The document container or its XML part could not be read."""


# Status codes surfaced by the HTTP layer for each engine error code.
STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.FILE_TOO_LARGE: http_status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorCode.UNSUPPORTED_MIMETYPE: http_status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    ErrorCode.EMPTY_FILE: http_status.HTTP_400_BAD_REQUEST,
    ErrorCode.NO_TEXT_EXTRACTED: http_status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.DECODE_ERROR: http_status.HTTP_422_UNPROCESSABLE_ENTITY,
}


# Convenience constructors (keep validators short)
def file_too_large(max_mb: int, *, details: dict | None = None) -> AppError:
    return AppError(
        code=ErrorCode.FILE_TOO_LARGE,
        reason=ErrorReason.FILE_TOO_LARGE.value.format(max_mb=max_mb),
        status_code=STATUS_BY_CODE[ErrorCode.FILE_TOO_LARGE],
        details=details,
    )


def unsupported_mimetype(*, details: dict | None = None) -> AppError:
    return AppError(
        code=ErrorCode.UNSUPPORTED_MIMETYPE,
        reason=ErrorReason.UNSUPPORTED_MIMETYPE.value,
        status_code=STATUS_BY_CODE[ErrorCode.UNSUPPORTED_MIMETYPE],
        details=details,
    )


def empty_file(*, details: dict | None = None) -> AppError:
    return AppError(
        code=ErrorCode.EMPTY_FILE,
        reason=ErrorReason.EMPTY_FILE.value,
        status_code=STATUS_BY_CODE[ErrorCode.EMPTY_FILE],
        details=details,
    )
