"""docextract/extraction/types.py

Lightweight dataclasses shared by every extraction path.
Design goals:
- request/result objects are immutable and live for one call only
- the result maps 1:1 onto the `{success, text, error}` consumer contract
"""


from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from docextract.core import ErrorCode

if TYPE_CHECKING:
    from docextract.core.config import Settings

StreamFilter = Literal["flate", "none", "unknown"]

PDF_MIMETYPE = "application/pdf"
DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIMETYPE = "application/msword"

SUPPORTED_MIMETYPES = (PDF_MIMETYPE, DOCX_MIMETYPE, DOC_MIMETYPE)


@dataclass(frozen=True)
class ExtractionRequest:
    content: bytes
    mimetype: str
    size: int | None = None  # declared by the host; never trusted below len(content)
    filename: str | None = None

    @property
    def effective_size(self) -> int:
        return max(self.size or 0, len(self.content))


@dataclass(frozen=True)
class ExtractionResult:
    text: str = ""
    methods_used: tuple[str, ...] = ()
    error_code: ErrorCode | None = None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.error_code is None

    @classmethod
    def ok(cls, text: str, methods_used: tuple[str, ...] | list[str]) -> "ExtractionResult":
        return cls(text=text, methods_used=tuple(methods_used))

    @classmethod
    def failed(
        cls,
        code: ErrorCode,
        message: str,
        methods_used: tuple[str, ...] | list[str] = (),
    ) -> "ExtractionResult":
        return cls(text="", methods_used=tuple(methods_used), error_code=code, error=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "text": self.text,
            "error": self.error,
            "methodsUsed": list(self.methods_used),
        }


@dataclass(frozen=True)
class Stream:
    data: bytes
    filter: StreamFilter
    offset: int  # byte offset of the payload in the source buffer


@dataclass(frozen=True)
class TextBlock:
    data: bytes  # bytes between BT and ET
    offset: int


@dataclass(frozen=True)
class ClassificationVerdict:
    passed: bool
    reason: str | None  # first rule that rejected the text
    char_count: int
    metadata_hits: int
    nonprintable_ratio: float
    word_count: int
    mean_word_length: float


@dataclass(frozen=True)
class ClassifierThresholds:
    min_chars: int = 100
    max_metadata_hits: int = 2
    max_nonprintable_ratio: float = 0.10
    min_words: int = 20
    min_mean_word_length: float = 2.0
    max_mean_word_length: float = 12.0

    @classmethod
    def from_settings(cls, s: "Settings") -> "ClassifierThresholds":
        return cls(
            min_chars=s.CLASSIFIER_MIN_CHARS,
            max_metadata_hits=s.CLASSIFIER_MAX_METADATA_HITS,
            max_nonprintable_ratio=s.CLASSIFIER_MAX_NONPRINTABLE_RATIO,
            min_words=s.CLASSIFIER_MIN_WORDS,
            min_mean_word_length=s.CLASSIFIER_MIN_MEAN_WORD_LENGTH,
            max_mean_word_length=s.CLASSIFIER_MAX_MEAN_WORD_LENGTH,
        )
