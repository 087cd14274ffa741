"""
Shared fixtures: documents are built in memory so tests never need sample files.
"""
import io
import struct
import zipfile
import zlib

import pytest

from docextract.core.config import Settings


PROSE = (
    "The water cycle describes how water moves through the environment. "
    "Heat from the sun causes evaporation from oceans, lakes and rivers. "
    "As the vapour rises it cools and condenses into clouds. "
    "Precipitation returns the water to the surface as rain or snow. "
    "Rivers and groundwater carry it back to the sea, and the cycle begins again."
)

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


def _pdf_escape(text: str) -> bytes:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)").encode("latin-1")


def content_stream(lines: list[str]) -> bytes:
    parts = [b"BT", b"/F1 12 Tf", b"72 720 Td", b"14 TL"]
    for line in lines:
        parts.append(b"(" + _pdf_escape(line) + b") Tj T*")
    parts.append(b"ET")
    return b"\n".join(parts)


def prose_lines(text: str = PROSE) -> list[str]:
    return [s.strip() + "." for s in text.split(".") if s.strip()]


def build_pdf(content: bytes, *, compress: bool = False) -> bytes:
    """Minimal single-page PDF with a correct xref table."""
    stream = zlib.compress(content) if compress else content
    filt = b"/Filter /FlateDecode " if compress else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< " + filt + b"/Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for i, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{i} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_pos = len(out)
    out += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode()
    for off in offsets:
        out += f"{off:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_pos}\n%%EOF\n".encode()
    return bytes(out)


def docx_xml(paragraphs: list[list[str]]) -> bytes:
    """Each paragraph is a list of run texts."""
    body = []
    for runs in paragraphs:
        rs = "".join(f'<w:r><w:t xml:space="preserve">{r}</w:t></w:r>' for r in runs)
        body.append(f"<w:p>{rs}</w:p>")
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{"".join(body)}</w:body></w:document>'
    ).encode("utf-8")


def build_docx(paragraphs: list[str] | None = None, *, xml: bytes | None = None, include_main: bool = True) -> bytes:
    if xml is None:
        xml = docx_xml([[p] if p else [] for p in (paragraphs or [])])
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", '<?xml version="1.0"?><Types/>')
        if include_main:
            zf.writestr("word/document.xml", xml)
    return buf.getvalue()


def corrupt_member(package: bytes, name: str) -> bytes:
    """Overwrite one member's compressed bytes with 0xFF, leaving the directory intact."""
    with zipfile.ZipFile(io.BytesIO(package)) as zf:
        info = zf.getinfo(name)
    buf = bytearray(package)
    # local header: 30 fixed bytes, then file name and extra field
    name_len, extra_len = struct.unpack("<HH", buf[info.header_offset + 26:info.header_offset + 30])
    start = info.header_offset + 30 + name_len + extra_len
    buf[start:start + info.compress_size] = b"\xff" * info.compress_size
    return bytes(buf)


def build_doc(lines: list[str]) -> bytes:
    """Fake legacy .doc: prose runs separated by binary filler."""
    header = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 24
    out = bytearray(header)
    for line in lines:
        out += line.encode("latin-1") + b"\r\x00\x01\x02"
    out += b"\x00ab\x00" + b"#@$%^&*~|\x00" + b"\x00" * 16
    return bytes(out)


@pytest.fixture
def offline_settings() -> Settings:
    """Only the in-house stream strategies run; results are host-independent."""
    return Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=False)


@pytest.fixture
def prose_pdf() -> bytes:
    return build_pdf(content_stream(prose_lines()), compress=True)
