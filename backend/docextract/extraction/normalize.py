"""docextract/extraction/normalize.py

Turns whatever a strategy recovered (bytes in an unknown encoding, or str)
into storable canonical text:
- UTF-8 first, then a constrained candidate list via charset_normalizer
- no NUL/C0/C1 controls except newline and tab
- LF line endings, collapsed whitespace
- truncation that prefers a sentence boundary
"""

from __future__ import annotations

import codecs
import re

from charset_normalizer import from_bytes


# Regional code pages are only offered when the runtime knows them.
_PREFERRED_ENCODINGS = ("ascii", "latin_1")
_OPTIONAL_ENCODINGS = ("iso8859_2", "cp1250", "cp1252")

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_UNSAFE_CHARS = re.compile(r"[^\t\n\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")
_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE = re.compile(r" *\n *")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

# Truncation only snaps back to a period found in the last 20% of the budget.
SENTENCE_BOUNDARY_RATIO = 0.8


def available_encodings() -> list[str]:
    encodings = list(_PREFERRED_ENCODINGS)
    for name in _OPTIONAL_ENCODINGS:
        try:
            codecs.lookup(name)
        except LookupError:
            continue
        encodings.append(name)
    return encodings


def decode_bytes(data: bytes) -> str:
    """Decode recovered bytes, trying strict UTF-8 before guessing."""
    if not data:
        return ""

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(data, cp_isolation=available_encodings()).best()
    if best is not None:
        return str(best)

    # latin-1 maps every byte, so this cannot fail
    return data.decode("latin_1")


def truncate_text(text: str, max_length: int) -> str:
    if max_length <= 0 or len(text) <= max_length:
        return text

    cut = text[:max_length]
    last_period = cut.rfind(".")
    if last_period != -1 and last_period > max_length * SENTENCE_BOUNDARY_RATIO:
        return cut[: last_period + 1]
    return cut


def normalize_text(raw: str | bytes | None, max_length: int | None = None) -> str:
    if not raw:
        return ""

    text = decode_bytes(raw) if isinstance(raw, (bytes, bytearray)) else raw

    text = text.lstrip("\ufeff")
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    text = _CONTROL_CHARS.sub("", text)
    # lone surrogates and non-characters survive decoding with some codecs
    text = _UNSAFE_CHARS.sub("?", text)

    text = _HORIZONTAL_WS.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    text = text.strip()

    if max_length:
        text = truncate_text(text, max_length)
    return text
