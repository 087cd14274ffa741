"""docextract/extraction/quality.py

Cheap, explainable heuristics deciding whether recovered text is real prose.

A degenerate parse tends to leak PDF object syntax, OOXML tags or binary noise.
Such output must never reach the question generator, so every candidate is
checked here before it can become a successful result. Rules run in order and
the first one that fails names the verdict's reason.
"""



import re

from docextract.extraction.types import ClassificationVerdict, ClassifierThresholds


_METADATA_SIGNATURES = [
    r"\b\d+\s+\d+\s+obj\b",
    r"\bendobj\b",
    r"\bendstream\b",
    r"/Filter\b",
    r"/FlateDecode\b",
    r"/Length\s*\d",
    r"/Type\s*/\w+",
    r"/Font\b",
    r"/BaseFont\b",
    r"/Encoding\b",
    r"/Resources\b",
    r"/ProcSet\b",
    r"/MediaBox\b",
    r"/XObject\b",
    r"/Contents\b",
    r"/Parent\b",
    r"\bxref\b",
    r"\btrailer\b",
    r"\bstartxref\b",
    r"%PDF-\d",
    r"<w:[A-Za-z]+",
]

_METADATA_PATTERNS = [re.compile(p) for p in _METADATA_SIGNATURES]

_WORD = re.compile(r"\w+")


def _is_expected_char(ch: str) -> bool:
    code = ord(ch)
    if 32 <= code <= 126 or ch in "\n\t\r":
        return True
    # Latin-1 supplement + Latin Extended-A/B (accented European letters)
    if 0xA0 <= code <= 0x24F:
        return True
    # General punctuation: typographic quotes, dashes, ellipsis
    if 0x2000 <= code <= 0x206F:
        return True
    return False


def _nonprintable_ratio(text: str) -> float:
    if not text:
        return 0.0
    bad = sum(1 for ch in text if not _is_expected_char(ch))
    return bad / max(1, len(text))


def count_metadata_hits(text: str) -> int:
    return sum(len(p.findall(text)) for p in _METADATA_PATTERNS)


def classify_text(text: str | None, thresholds: ClassifierThresholds | None = None) -> ClassificationVerdict:
    th = thresholds or ClassifierThresholds()
    raw = (text or "").strip()

    char_count = len(raw)
    metadata_hits = count_metadata_hits(raw)
    nonprintable_ratio = _nonprintable_ratio(raw)
    words = _WORD.findall(raw)
    word_count = len(words)
    mean_word_length = (sum(len(w) for w in words) / word_count) if word_count else 0.0

    reason: str | None = None
    if char_count < th.min_chars:
        reason = "too_short"
    elif metadata_hits > th.max_metadata_hits:
        reason = "format_metadata"
    elif nonprintable_ratio > th.max_nonprintable_ratio:
        reason = "nonprintable"
    elif word_count < th.min_words:
        reason = "too_few_words"
    elif not (th.min_mean_word_length <= mean_word_length <= th.max_mean_word_length):
        reason = "word_length"

    return ClassificationVerdict(
        passed=reason is None,
        reason=reason,
        char_count=char_count,
        metadata_hits=metadata_hits,
        nonprintable_ratio=float(round(nonprintable_ratio, 4)),
        word_count=word_count,
        mean_word_length=float(round(mean_word_length, 3)),
    )


def is_valid_text(text: str | None, thresholds: ClassifierThresholds | None = None) -> bool:
    return classify_text(text, thresholds).passed
