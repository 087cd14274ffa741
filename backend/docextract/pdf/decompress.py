"""docextract/pdf/decompress.py

Best-effort FlateDecode recovery for content streams.

Producers in the wild emit raw deflate, zlib with a stripped or broken header,
gzip, or zlib with a truncated checksum. We try the variants in a fixed order
and keep the first non-empty output. Nothing here raises: if no variant works
the original bytes come back and the tokenizer simply finds no text in them.

Every variant inflates through a decompress object bounded by `max_output`,
so a small stream cannot expand into an unbounded buffer. Output past the
cap is dropped.
"""

from __future__ import annotations

import logging
import zlib

from docextract.core.config import settings
from docextract.extraction.types import StreamFilter

logger = logging.getLogger("docextract.pdf.decompress")

# Raw deflate windows to retry, largest first.
_MAX_RAW_WBITS = 15
_MIN_RAW_WBITS = 8

_SYNTHETIC_ZLIB_HEADER = b"\x78\x9c"
_ZLIB_HEADER_FIRST_BYTE = 0x78


def _bounded(data: bytes, wbits: int, max_output: int) -> bytes:
    d = zlib.decompressobj(wbits)
    out = d.decompress(data, max_output)
    if d.unconsumed_tail:
        logger.warning("pdf.inflate_capped", extra={"in_bytes": len(data), "max_output": max_output})
    return out


def _raw_deflate(data: bytes, max_output: int) -> bytes:
    return _bounded(data, -zlib.MAX_WBITS, max_output)


def _raw_deflate_windows(data: bytes, max_output: int) -> bytes:
    for wbits in range(_MAX_RAW_WBITS, _MIN_RAW_WBITS - 1, -1):
        try:
            out = _bounded(data, -wbits, max_output)
        except (zlib.error, ValueError):
            continue
        if out:
            return out
    return b""


def _zlib_wrapped(data: bytes, max_output: int) -> bytes:
    return _bounded(data, zlib.MAX_WBITS, max_output)


def _auto_detect(data: bytes, max_output: int) -> bytes:
    # wbits | 32 accepts a zlib or gzip header; the decompress object does not
    # insist on the trailing checksum.
    return _bounded(data, zlib.MAX_WBITS | 32, max_output)


def _synthetic_header(data: bytes, max_output: int) -> bytes:
    return _bounded(_SYNTHETIC_ZLIB_HEADER + data, zlib.MAX_WBITS, max_output)


_VARIANTS = (
    ("raw_deflate", _raw_deflate),
    ("raw_deflate_windows", _raw_deflate_windows),
    ("zlib", _zlib_wrapped),
    ("auto_detect", _auto_detect),
    ("synthetic_header", _synthetic_header),
)


def looks_zlib_wrapped(data: bytes) -> bool:
    if len(data) < 2 or data[0] != _ZLIB_HEADER_FIRST_BYTE:
        return False
    return ((data[0] << 8) | data[1]) % 31 == 0


def inflate(data: bytes, max_output: int | None = None) -> bytes | None:
    """Run the fallback chain; None when every variant failed.

    At most `max_output` bytes come back (default MAX_INFLATED_BYTES).
    """
    limit = max_output or settings.MAX_INFLATED_BYTES
    for name, fn in _VARIANTS:
        try:
            out = fn(data, limit)
        except (zlib.error, ValueError):
            continue
        if out:
            logger.debug("pdf.inflate", extra={"variant": name, "in_bytes": len(data), "out_bytes": len(out)})
            return out
    return None


def decompress_stream(data: bytes, filter_hint: StreamFilter, max_output: int | None = None) -> bytes:
    if not data:
        return data

    if filter_hint == "flate" or (filter_hint == "unknown" and looks_zlib_wrapped(data)):
        out = inflate(data, max_output)
        if out is not None:
            return out

    return data
