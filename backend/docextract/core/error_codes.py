# docextract/core/error_codes.py
from enum import Enum

class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Upload preconditions
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MIMETYPE = "UNSUPPORTED_MIMETYPE"
    EMPTY_FILE = "EMPTY_FILE"

    # Extraction outcome
    NO_TEXT_EXTRACTED = "NO_TEXT_EXTRACTED"
    DECODE_ERROR = "DECODE_ERROR"
