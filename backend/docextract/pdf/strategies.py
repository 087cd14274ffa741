"""docextract/pdf/strategies.py

The four independent ways we try to get text out of a PDF, best first:
1) pdftotext (poppler), when the executable is on PATH
2) an installed object-model library: PyMuPDF (fitz), pdfplumber, pypdf
3) our own stream scan: stream -> inflate -> BT/ET tokenizer
4) BT/ET tokenizer over the raw, undecompressed buffer

Each takes the PDF bytes and returns recovered text (str or undecoded bytes)
or None. Failures inside a strategy are the cascade's problem, not ours.
"""

from __future__ import annotations

import importlib.util
import io
import logging
import os
import re
import shutil
import subprocess
import tempfile

from docextract.core.config import Settings
from docextract.pdf.decompress import decompress_stream
from docextract.pdf.streams import iter_streams
from docextract.pdf.tokenizer import tokenize_bytes

logger = logging.getLogger("docextract.pdf.strategies")

_WHITESPACE = re.compile(rb"\s")
_MEANINGFUL = re.compile(rb"[A-Za-z0-9\xc0-\xff]")


# ---------------------------------------------------------------------------
# 1) external tool
# ---------------------------------------------------------------------------

def find_pdftotext(cfg: Settings) -> str | None:
    if not cfg.ENABLE_EXTERNAL_TOOL:
        return None
    return shutil.which(cfg.PDFTOTEXT_BINARY)


def extract_with_pdftotext(content: bytes, cfg: Settings) -> bytes | None:
    exe = find_pdftotext(cfg)
    if not exe:
        return None

    # Removed on every exit path, including timeouts and exceptions.
    with tempfile.TemporaryDirectory(prefix="docextract-") as tmp:
        pdf_path = os.path.join(tmp, "input.pdf")
        txt_path = os.path.join(tmp, "output.txt")

        with open(pdf_path, "wb") as fh:
            fh.write(content)

        try:
            proc = subprocess.run(
                [exe, pdf_path, txt_path],
                capture_output=True,
                timeout=cfg.EXTERNAL_TOOL_TIMEOUT_SECONDS,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("pdf.pdftotext_timeout", extra={"timeout_s": cfg.EXTERNAL_TOOL_TIMEOUT_SECONDS})
            return None

        if proc.returncode != 0 or not os.path.exists(txt_path):
            logger.info(
                "pdf.pdftotext_failed",
                extra={"returncode": proc.returncode, "stderr": proc.stderr[:500].decode("utf-8", errors="replace")},
            )
            return None

        with open(txt_path, "rb") as fh:
            return fh.read() or None


# ---------------------------------------------------------------------------
# 2) object-model libraries
# ---------------------------------------------------------------------------

def _read_pymupdf(content: bytes) -> str:
    import fitz  # type: ignore

    doc = fitz.open(stream=content, filetype="pdf")
    try:
        texts = [doc.load_page(i).get_text("text") or "" for i in range(doc.page_count)]
    finally:
        doc.close()
    return "\n\n".join(texts)


def _read_pdfplumber(content: bytes) -> str:
    import pdfplumber  # type: ignore

    with pdfplumber.open(io.BytesIO(content)) as pdf:
        texts = [p.extract_text() or "" for p in pdf.pages]
    return "\n\n".join(texts)


def _read_pypdf(content: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(content))
    texts = [p.extract_text() or "" for p in reader.pages]
    return "\n\n".join(texts)


# (backend name, importable module, reader) in preference order
_LIBRARY_BACKENDS = (
    ("pymupdf", "fitz", _read_pymupdf),
    ("pdfplumber", "pdfplumber", _read_pdfplumber),
    ("pypdf", "pypdf", _read_pypdf),
)


def library_backends(cfg: Settings) -> list[str]:
    if not cfg.ENABLE_LIBRARY:
        return []
    return [name for name, module, _ in _LIBRARY_BACKENDS if importlib.util.find_spec(module) is not None]


def extract_with_library(content: bytes, cfg: Settings) -> str | None:
    available = set(library_backends(cfg))
    for name, _, reader in _LIBRARY_BACKENDS:
        if name not in available:
            continue
        try:
            text = reader(content)
        except Exception as e:
            logger.info("pdf.library_failed", extra={"backend": name, "error": str(e)[:300]})
            continue
        if text and text.strip():
            logger.debug("pdf.library_ok", extra={"backend": name})
            return text
    return None


# ---------------------------------------------------------------------------
# 3) structured stream scan
# ---------------------------------------------------------------------------

def extract_from_streams(content: bytes, cfg: Settings) -> bytes | None:
    fragments: list[bytes] = []
    stream_count = 0
    # One inflate budget for the whole document; only inflated output is charged.
    budget = cfg.MAX_INFLATED_BYTES
    for stream in iter_streams(content):
        if budget <= 0:
            logger.warning("pdf.inflate_budget_exhausted", extra={"streams": stream_count})
            break
        stream_count += 1
        data = decompress_stream(stream.data, stream.filter, budget)
        if data is not stream.data:
            budget -= len(data)
        text = tokenize_bytes(data)
        if text.strip():
            fragments.append(text)

    logger.debug("pdf.streams_scanned", extra={"streams": stream_count, "with_text": len(fragments)})
    if not fragments:
        return None

    joined = b"\n".join(fragments)
    # a handful of glyphs is structural noise, not content
    if len(_WHITESPACE.sub(b"", joined)) < cfg.STREAM_MIN_CHARS:
        return None
    return joined


# ---------------------------------------------------------------------------
# 4) unstructured fallback
# ---------------------------------------------------------------------------

def extract_from_raw_blocks(content: bytes, cfg: Settings) -> bytes | None:
    text = tokenize_bytes(content)
    if len(_MEANINGFUL.findall(text)) < cfg.STREAM_MIN_CHARS:
        return None
    return text
