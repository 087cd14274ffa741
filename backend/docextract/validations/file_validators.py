"""
file_validators.py
- Purpose: Centralized precondition checks for documents handed to the engine.
- Design: Raise AppError with stable error codes; no document parsing happens here.
"""

from docextract.core.errors import empty_file, file_too_large, unsupported_mimetype
from docextract.extraction.types import SUPPORTED_MIMETYPES

BYTES_PER_MB = 1024 * 1024


def normalize_mimetype(mimetype: str | None) -> str:
    # "Application/PDF; charset=binary" -> "application/pdf"
    return (mimetype or "").split(";", 1)[0].strip().lower()


def validate_size(size_bytes: int, max_mb: int) -> None:
    if size_bytes > max_mb * BYTES_PER_MB:
        raise file_too_large(max_mb, details={"size_bytes": size_bytes, "max_mb": max_mb})


def validate_mimetype(mimetype: str | None) -> str:
    normalized = normalize_mimetype(mimetype)
    if normalized not in SUPPORTED_MIMETYPES:
        raise unsupported_mimetype(details={"content_type": mimetype})
    return normalized


def validate_not_empty(content: bytes) -> None:
    if not content:
        raise empty_file()


def validate_document(content: bytes, mimetype: str | None, size_bytes: int, *, max_mb: int) -> str:
    """Size, then mimetype, then emptiness. Returns the normalized mimetype."""
    validate_size(size_bytes, max_mb)
    normalized = validate_mimetype(mimetype)
    validate_not_empty(content)
    return normalized
