import os
import stat
import sys
import zlib

import pytest

from conftest import PROSE, build_pdf, content_stream, prose_lines

from docextract.core import ErrorCode
from docextract.core.config import Settings
from docextract.pdf import extract as pdf_extract
from docextract.pdf import strategies
from docextract.pdf.extract import available_methods, extract_text_from_bytes
from docextract.pdf.strategies import extract_from_raw_blocks, extract_from_streams


def test_compressed_pdf_via_stream_scan(prose_pdf, offline_settings):
    result = extract_text_from_bytes(prose_pdf, offline_settings)
    assert result.success
    assert result.methods_used == ("streams",)
    assert "water cycle" in result.text
    assert "Precipitation returns the water" in result.text


def test_uncompressed_pdf_via_stream_scan(offline_settings):
    pdf = build_pdf(content_stream(prose_lines()))
    result = extract_text_from_bytes(pdf, offline_settings)
    assert result.success
    assert result.methods_used == ("streams",)
    assert result.text.startswith("The water cycle describes")


def test_bare_text_blocks_use_raw_fallback(offline_settings):
    buf = b"%PDF-1.4 garbage BT (" + PROSE.encode() + b") Tj ET trailing"
    result = extract_text_from_bytes(buf, offline_settings)
    assert result.success
    assert result.methods_used == ("streams", "raw_text_blocks")
    assert result.text == PROSE


def test_garbage_yields_no_text(offline_settings):
    result = extract_text_from_bytes(b"\x00\x01 not a pdf \xff" * 50, offline_settings)
    assert not result.success
    assert result.error_code == ErrorCode.NO_TEXT_EXTRACTED
    assert result.text == ""
    assert result.methods_used == ("streams", "raw_text_blocks")


def test_short_stream_text_is_not_offered(offline_settings):
    pdf = build_pdf(content_stream(["Page 1"]))
    assert extract_from_streams(pdf, offline_settings) is None
    assert extract_from_raw_blocks(pdf, offline_settings) is None


def test_inflate_budget_limits_stream_scan(prose_pdf, offline_settings):
    tight = Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=False, MAX_INFLATED_BYTES=64)
    assert extract_from_streams(prose_pdf, offline_settings) is not None
    assert extract_from_streams(prose_pdf, tight) is None


def test_uncompressed_streams_do_not_use_the_budget():
    text_stream = zlib.compress(content_stream(prose_lines()))
    buf = (
        b"1 0 obj\n<< /Filter /DCTDecode >>\nstream\n" + b"\xff" * 10_000 + b"\nendstream\nendobj\n"
        b"2 0 obj\n<< /Filter /FlateDecode >>\nstream\n" + text_stream + b"\nendstream\nendobj\n"
    )
    cfg = Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=False, MAX_INFLATED_BYTES=4096)
    assert b"water cycle" in extract_from_streams(buf, cfg)


def test_flate_bomb_stays_within_budget(monkeypatch):
    seen = []
    real_tokenize = strategies.tokenize_bytes

    def measuring_tokenize(data):
        seen.append(len(data))
        return real_tokenize(data)

    monkeypatch.setattr(strategies, "tokenize_bytes", measuring_tokenize)
    bomb = build_pdf(b"\x00" * (8 * 1024 * 1024), compress=True)
    cfg = Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=False, MAX_INFLATED_BYTES=1024 * 1024)

    result = extract_text_from_bytes(bomb, cfg)

    assert result.error_code == ErrorCode.NO_TEXT_EXTRACTED
    assert seen and max(seen) <= 1024 * 1024


def test_raising_strategy_falls_through(monkeypatch, prose_pdf, offline_settings):
    def boom(content, cfg):
        raise RuntimeError("library exploded")

    monkeypatch.setattr(
        pdf_extract,
        "PDF_STRATEGIES",
        (("library", boom, lambda cfg: True),) + pdf_extract.PDF_STRATEGIES[2:],
    )
    result = extract_text_from_bytes(prose_pdf, offline_settings)
    assert result.success
    assert result.methods_used == ("library", "streams")


def test_leaked_syntax_is_rejected_and_next_strategy_wins(monkeypatch, prose_pdf, offline_settings):
    def leaky(content, cfg):
        return PROSE + " 4 0 obj << /Filter /FlateDecode /Length 512 >> stream endstream endobj"

    monkeypatch.setattr(
        pdf_extract,
        "PDF_STRATEGIES",
        (("pdftotext", leaky, lambda cfg: True),) + pdf_extract.PDF_STRATEGIES[2:],
    )
    result = extract_text_from_bytes(prose_pdf, offline_settings)
    assert result.success
    assert result.methods_used == ("pdftotext", "streams")
    assert "FlateDecode" not in result.text


def test_unavailable_strategies_are_not_listed(offline_settings):
    assert available_methods(offline_settings) == ["streams", "raw_text_blocks"]


def test_library_methods_are_expanded_per_backend():
    pytest.importorskip("pypdf")
    cfg = Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=True)
    methods = available_methods(cfg)
    assert "library:pypdf" in methods
    assert methods[-2:] == ["streams", "raw_text_blocks"]


def test_library_strategy_reads_real_pdf(prose_pdf):
    pytest.importorskip("pypdf")
    cfg = Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=True)
    result = extract_text_from_bytes(prose_pdf, cfg)
    assert result.success
    assert result.methods_used == ("library",)
    assert "water" in result.text


def test_text_is_truncated_to_max_length(prose_pdf):
    cfg = Settings(ENABLE_EXTERNAL_TOOL=False, ENABLE_LIBRARY=False, MAX_TEXT_LENGTH=200)
    result = extract_text_from_bytes(prose_pdf, cfg)
    assert result.success
    assert len(result.text) <= 200
    assert result.text.endswith(".")


# ---------------------------------------------------------------------------
# pdftotext, driven through a fake executable
# ---------------------------------------------------------------------------

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="shell script stand-in for pdftotext")


def _fake_tool(tmp_path, body: str) -> str:
    path = tmp_path / "fake-pdftotext"
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return str(path)


@posix_only
def test_pdftotext_output_is_used_and_temp_files_removed(tmp_path, prose_pdf):
    record = tmp_path / "input-path"
    exe = _fake_tool(
        tmp_path,
        f'echo "$1" > "{record}"\n'
        f"cat > \"$2\" <<'TXT'\n{PROSE}\nTXT\n",
    )
    cfg = Settings(PDFTOTEXT_BINARY=exe, ENABLE_LIBRARY=False)

    result = extract_text_from_bytes(prose_pdf, cfg)

    assert result.success
    assert result.methods_used == ("pdftotext",)
    assert result.text == PROSE
    input_path = record.read_text().strip()
    assert not os.path.exists(os.path.dirname(input_path))


@posix_only
def test_pdftotext_failure_falls_through(tmp_path, prose_pdf):
    exe = _fake_tool(tmp_path, "echo 'Syntax Error: broken' >&2\nexit 3\n")
    cfg = Settings(PDFTOTEXT_BINARY=exe, ENABLE_LIBRARY=False)

    result = extract_text_from_bytes(prose_pdf, cfg)

    assert result.success
    assert result.methods_used == ("pdftotext", "streams")


@posix_only
def test_pdftotext_timeout_falls_through(tmp_path, prose_pdf):
    exe = _fake_tool(tmp_path, "exec sleep 5\n")
    cfg = Settings(PDFTOTEXT_BINARY=exe, ENABLE_LIBRARY=False, EXTERNAL_TOOL_TIMEOUT_SECONDS=1)

    result = extract_text_from_bytes(prose_pdf, cfg)

    assert result.success
    assert result.methods_used == ("pdftotext", "streams")


def test_missing_pdftotext_is_skipped(prose_pdf):
    cfg = Settings(PDFTOTEXT_BINARY="definitely-not-installed-pdftotext", ENABLE_LIBRARY=False)
    assert "pdftotext" not in available_methods(cfg)
    assert extract_text_from_bytes(prose_pdf, cfg).methods_used == ("streams",)
