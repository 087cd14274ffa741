"""docextract/pdf/extract.py

Deterministic PDF -> text extraction.

Preferred strategy:
1) pdftotext (external tool)
2) PyMuPDF (fitz) / pdfplumber / pypdf
3) stream scan + our own content-stream tokenizer
4) BT/ET scan of the raw buffer (very basic)
"""



from functools import partial
from typing import Callable

from docextract.core.config import Settings, settings
from docextract.extraction.cascade import Strategy, run_strategies
from docextract.extraction.types import ClassifierThresholds, ExtractionResult
from docextract.pdf.strategies import (
    extract_from_raw_blocks,
    extract_from_streams,
    extract_with_library,
    extract_with_pdftotext,
    find_pdftotext,
    library_backends,
)


def _always(cfg: Settings) -> bool:
    return True


# (name, strategy, is_available) in priority order
PDF_STRATEGIES: tuple[tuple[str, Callable, Callable[[Settings], bool]], ...] = (
    ("pdftotext", extract_with_pdftotext, lambda cfg: find_pdftotext(cfg) is not None),
    ("library", extract_with_library, lambda cfg: bool(library_backends(cfg))),
    ("streams", extract_from_streams, _always),
    ("raw_text_blocks", extract_from_raw_blocks, _always),
)


def pdf_strategies(cfg: Settings) -> list[tuple[str, Strategy]]:
    """Strategies that can actually run here, bound to `cfg`."""
    return [(name, partial(fn, cfg=cfg)) for name, fn, available in PDF_STRATEGIES if available(cfg)]


def available_methods(cfg: Settings | None = None) -> list[str]:
    cfg = cfg or settings
    methods: list[str] = []
    for name, _, available in PDF_STRATEGIES:
        if not available(cfg):
            continue
        if name == "library":
            methods.extend(f"library:{backend}" for backend in library_backends(cfg))
        else:
            methods.append(name)
    return methods


def extract_text_from_bytes(pdf_bytes: bytes, cfg: Settings | None = None) -> ExtractionResult:
    cfg = cfg or settings
    return run_strategies(
        pdf_bytes,
        pdf_strategies(cfg),
        max_length=cfg.MAX_TEXT_LENGTH,
        thresholds=ClassifierThresholds.from_settings(cfg),
    )
