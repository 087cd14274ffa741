"""docextract/extraction/cascade.py

Runs an ordered list of strategies over one document and keeps the first
output that survives normalization + the validity classifier.

A strategy is `bytes -> str | bytes | None`. Anything it raises is logged and
treated as "no text"; a DocumentDecodeError is remembered so an unreadable
container is reported as such instead of a plain "no text".
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence, Union

from docextract.core import ErrorCode, ErrorReason
from docextract.core.errors import DocumentDecodeError
from docextract.extraction.normalize import normalize_text
from docextract.extraction.quality import classify_text
from docextract.extraction.types import ClassifierThresholds, ExtractionResult

logger = logging.getLogger("docextract.cascade")

RawText = Union[str, bytes, None]
Strategy = Callable[[bytes], RawText]


def run_strategies(
    content: bytes,
    strategies: Sequence[tuple[str, Strategy]],
    *,
    max_length: int,
    thresholds: ClassifierThresholds | None = None,
) -> ExtractionResult:
    attempted: list[str] = []
    decode_error: DocumentDecodeError | None = None

    for name, strategy in strategies:
        attempted.append(name)
        try:
            raw = strategy(content)
        except DocumentDecodeError as e:
            decode_error = e
            logger.warning("extraction.decode_error", extra={"strategy": name, "error": str(e)})
            continue
        except Exception:
            logger.warning("extraction.strategy_failed", extra={"strategy": name}, exc_info=True)
            continue

        if not raw:
            logger.info("extraction.strategy", extra={"strategy": name, "outcome": "empty"})
            continue

        text = normalize_text(raw, max_length=max_length)
        verdict = classify_text(text, thresholds)
        logger.info(
            "extraction.strategy",
            extra={
                "strategy": name,
                "outcome": "accepted" if verdict.passed else "rejected",
                "reason": verdict.reason,
                "char_count": verdict.char_count,
                "metadata_hits": verdict.metadata_hits,
                "nonprintable_ratio": verdict.nonprintable_ratio,
                "word_count": verdict.word_count,
                "mean_word_length": verdict.mean_word_length,
            },
        )
        if verdict.passed:
            return ExtractionResult.ok(text, attempted)

    if decode_error is not None:
        return ExtractionResult.failed(ErrorCode.DECODE_ERROR, ErrorReason.DECODE_ERROR.value, attempted)
    return ExtractionResult.failed(ErrorCode.NO_TEXT_EXTRACTED, ErrorReason.NO_TEXT_EXTRACTED.value, attempted)
