"""docextract/word/doc.py

Legacy binary .doc -> text, heuristically.

There is no attempt to parse the compound-file structure. We collect runs of
printable-looking bytes, drop the short ones, and keep only lines that read
like prose. Good enough for plain documents; formatting-heavy files will come
out thin and usually fail classification.
"""

from __future__ import annotations

import re


MIN_RUN_BYTES = 3
MIN_LINE_CHARS = 5

# Printable ASCII (32-126) or Latin-1 upper half (160-255)
_RUN = re.compile(rb"[\x20-\x7e\xa0-\xff]+")
_PROSE_LINE = re.compile(r"^[\w\s.,;:!?'\"()\-]+$")


def scan_runs(content: bytes) -> list[str]:
    """Contiguous printable runs; CR, LF and every other byte end a run."""
    runs: list[str] = []
    for m in _RUN.finditer(content):
        if len(m.group(0)) < MIN_RUN_BYTES:
            continue
        run = m.group(0).decode("latin_1").strip()
        if run:
            runs.append(run)
    return runs


def extract_doc_text(content: bytes) -> str:
    lines = [r for r in scan_runs(content) if len(r) > MIN_LINE_CHARS and _PROSE_LINE.match(r)]
    return "\n".join(lines)
