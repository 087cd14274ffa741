"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they are surfaced to teachers as the `error` field.
"""

from enum import Enum


class ErrorReason(str, Enum):
    INVALID_INPUT = "Invalid input"
    INTERNAL_ERROR = "Internal server error"

    FILE_TOO_LARGE = "File is too large. Maximum size is {max_mb} MB."
    UNSUPPORTED_MIMETYPE = "Invalid file type. Only PDF and Word documents are supported."
    EMPTY_FILE = "File is empty."
    NO_TEXT_EXTRACTED = (
        "Could not extract readable text from this document. PDF files may be scanned or "
        "image-based, encrypted, or use unsupported encoding. Word files must contain actual text content."
    )
    DECODE_ERROR = "Failed to extract text from document. The file may be corrupted."
