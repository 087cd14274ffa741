"""docextract/pdf/tokenizer.py

Pulls painted strings out of a (decompressed) content stream.

Only the text-showing operators inside `BT ... ET` blocks are understood:
  [ (a) -120 (b) <0c> ] TJ   array form, strings concatenated
  (a) Tj                     single string
  (a) '   and   aw ac (a) "  move to next line, then show
Everything else is ignored. Scanning is regex based, so malformed nesting just
means that occurrence produces nothing.
"""

from __future__ import annotations

import re
from typing import Iterator

from docextract.extraction.normalize import decode_bytes
from docextract.extraction.types import TextBlock


# A literal string may hold one level of balanced, unescaped parentheses.
_LITERAL = rb"\((?:[^()\\]|\\.|\((?:[^()\\]|\\.)*\))*\)"
_HEX = rb"<[0-9A-Fa-f\s]*>"
_STRING = rb"(?:" + _LITERAL + rb"|" + _HEX + rb")"

_TEXT_BLOCK = re.compile(rb"\bBT\b(.*?)\bET\b", re.DOTALL)

_OPERATOR = re.compile(
    rb"\[(?P<array>(?:" + _LITERAL + rb"|" + _HEX + rb"|[^\[\]()<>])*)\]\s*TJ"
    rb"|(?P<single>" + _STRING + rb")\s*Tj"
    rb"|(?P<newline>" + _STRING + rb")\s*['\"]",
    re.DOTALL,
)
_ARRAY_ITEM = re.compile(_STRING, re.DOTALL)

_ESCAPE = re.compile(rb"\\([0-7]{1,3}|\r\n|[\r\n]|.)", re.DOTALL)
_ESCAPES = {
    b"n": b"\n",
    b"r": b"\r",
    b"t": b"\t",
    b"b": b"\b",
    b"f": b"\f",
    b"(": b"(",
    b")": b")",
    b"\\": b"\\",
}
_NOT_HEX = re.compile(rb"[^0-9A-Fa-f]")


def _unescape(m: re.Match) -> bytes:
    token = m.group(1)
    if b"0" <= token[:1] <= b"7":
        return bytes([int(token, 8) & 0xFF])
    if token in (b"\r\n", b"\r", b"\n"):
        # backslash at end of line continues the string
        return b""
    return _ESCAPES.get(token, token)


def decode_literal(literal: bytes) -> bytes:
    """`(...)` with escapes resolved; outer parentheses removed."""
    return _ESCAPE.sub(_unescape, literal[1:-1])


def decode_hex(hex_string: bytes) -> bytes:
    """`<...>` to bytes; anything outside printable ASCII becomes a space."""
    digits = _NOT_HEX.sub(b"", hex_string)
    if len(digits) % 2:
        digits += b"0"

    out = bytearray()
    for i in range(0, len(digits), 2):
        value = int(digits[i:i + 2], 16)
        if 32 <= value <= 126:
            out.append(value)
        elif value in (10, 13):
            out += b"\n"
        else:
            out += b" "
    return bytes(out)


def decode_string(operand: bytes) -> bytes:
    if operand.startswith(b"<"):
        return decode_hex(operand)
    return decode_literal(operand)


def iter_text_blocks(data: bytes) -> Iterator[TextBlock]:
    for m in _TEXT_BLOCK.finditer(data):
        yield TextBlock(data=m.group(1), offset=m.start(1))


def decode_text_block(block: TextBlock) -> bytes:
    fragments: list[bytes] = []
    for m in _OPERATOR.finditer(block.data):
        if m.group("array") is not None:
            fragments.append(b"".join(decode_string(s.group(0)) for s in _ARRAY_ITEM.finditer(m.group("array"))))
        elif m.group("single") is not None:
            fragments.append(decode_string(m.group("single")))
        else:
            fragments.append(b"\n" + decode_string(m.group("newline")))
    return b" ".join(f for f in fragments if f)


def tokenize_bytes(data: bytes) -> bytes:
    decoded = (decode_text_block(b) for b in iter_text_blocks(data))
    return b" ".join(d for d in decoded if d.strip())


def tokenize_content(data: bytes) -> str:
    return decode_bytes(tokenize_bytes(data))
