"""docextract/pdf/streams.py

Slices `stream ... endstream` payloads out of a raw PDF buffer and works out
which filter each one declares by looking back at its object dictionary.
No cross-reference table is consulted; this is a linear scan.
"""

from __future__ import annotations

import re
from typing import Iterator

from docextract.extraction.types import Stream, StreamFilter


# `endstream` must not be mistaken for the start of a new stream.
_STREAM_START = re.compile(rb"(?<![A-Za-z])stream(?:\r\n|\r|\n)?")
_STREAM_END = re.compile(rb"(?:\r\n|\r|\n)?endstream")

_DIRECT_LENGTH = re.compile(rb"/Length\s+(\d+)(\s+\d+\s+R)?")
_FLATE_FILTER = re.compile(rb"/(?:FlateDecode|Fl)(?![A-Za-z])")

# How far back to look for the `N G obj` header of a stream's dictionary.
_DICTIONARY_LOOKBEHIND = 4096


def enclosing_dictionary(buf: bytes, stream_pos: int) -> bytes:
    lo = max(0, stream_pos - _DICTIONARY_LOOKBEHIND)
    obj_pos = buf.rfind(b"obj", lo, stream_pos)
    if obj_pos == -1:
        return buf[lo:stream_pos]
    return buf[obj_pos:stream_pos]


def detect_filter(dictionary: bytes) -> StreamFilter:
    if b"/Filter" not in dictionary:
        return "none"
    if _FLATE_FILTER.search(dictionary):
        return "flate"
    return "unknown"


def _declared_end(buf: bytes, start: int, dictionary: bytes) -> int | None:
    """Trust a direct /Length only when `endstream` follows where it says."""
    m = _DIRECT_LENGTH.search(dictionary)
    if not m or m.group(2):
        return None
    end = start + int(m.group(1))
    if end > len(buf):
        return None
    if not buf[end:end + 32].lstrip().startswith(b"endstream"):
        return None
    return end


def iter_streams(buf: bytes) -> Iterator[Stream]:
    pos = 0
    while True:
        m = _STREAM_START.search(buf, pos)
        if not m:
            return

        start = m.end()
        dictionary = enclosing_dictionary(buf, m.start())
        end = _declared_end(buf, start, dictionary)
        if end is None:
            e = _STREAM_END.search(buf, start)
            if not e:
                return
            end = e.start()
            pos = e.end()
        else:
            pos = end

        yield Stream(data=buf[start:end], filter=detect_filter(dictionary), offset=start)
