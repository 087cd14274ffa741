"""docextract/word/docx.py

DOCX -> text. The package is a zip; we only read `word/document.xml` and walk
`w:p` paragraphs in document order, concatenating their `w:t` runs.

The XML comes from an untrusted upload: entities are not resolved, no DTD is
loaded and the parser never touches the network.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib

from lxml import etree

from docextract.core.config import settings
from docextract.core.errors import DocumentDecodeError

logger = logging.getLogger("docextract.word.docx")

MAIN_PART = "word/document.xml"

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
_P = f"{{{W_NS}}}p"
_T = f"{{{W_NS}}}t"
_TAB = f"{{{W_NS}}}tab"
_BR = f"{{{W_NS}}}br"


def _safe_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
    )


# Raised by zipfile for a damaged member (bad deflate data, CRC mismatch),
# an unsupported compression method or an encrypted entry.
_UNREADABLE_PACKAGE = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    EOFError,
    zlib.error,
    NotImplementedError,
    RuntimeError,
    ValueError,
)


def read_main_part(content: bytes, max_bytes: int | None = None) -> bytes | None:
    limit = max_bytes or settings.MAX_INFLATED_BYTES
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as zf:
            if MAIN_PART not in zf.namelist():
                logger.info("docx.main_part_missing")
                return None
            size = zf.getinfo(MAIN_PART).file_size
            if size > limit:
                raise DocumentDecodeError(f"{MAIN_PART} expands to {size} bytes (limit {limit})")
            return zf.read(MAIN_PART)
    except _UNREADABLE_PACKAGE as e:
        raise DocumentDecodeError(f"not a readable DOCX package: {e}") from e


def paragraphs_from_xml(xml: bytes) -> list[str]:
    try:
        root = etree.fromstring(xml, parser=_safe_parser())
    except etree.XMLSyntaxError as e:
        raise DocumentDecodeError(f"malformed document XML: {e}") from e

    paragraphs: list[str] = []
    for p in root.iter(_P):
        parts: list[str] = []
        for node in p.iter(_T, _TAB, _BR):
            if node.tag == _T:
                parts.append(node.text or "")
            elif node.tag == _TAB:
                parts.append("\t")
            else:
                parts.append("\n")
        text = "".join(parts)
        if text.strip():
            paragraphs.append(text)
    return paragraphs


def extract_docx_text(content: bytes, max_bytes: int | None = None) -> str:
    xml = read_main_part(content, max_bytes)
    if not xml:
        return ""
    return "\n".join(paragraphs_from_xml(xml))
