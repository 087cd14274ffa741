# docextract/services/extraction_service.py
"""
extraction_service.py
- Purpose: Single entry point for "give me the text of this uploaded document".
- Owns: precondition checks, routing by mimetype, result logging.
- Design: Never raises for bad input; every outcome is an ExtractionResult so
  the job-processing host only ever reads {success, text, error}.
"""


import logging
import time
import uuid
from functools import partial

from docextract.core import AppError
from docextract.core.config import Settings, settings
from docextract.core.request_context import clear_extraction_context, set_context
from docextract.extraction.cascade import run_strategies
from docextract.extraction.types import (
    DOCX_MIMETYPE,
    PDF_MIMETYPE,
    SUPPORTED_MIMETYPES,
    ClassifierThresholds,
    ExtractionRequest,
    ExtractionResult,
)
from docextract.pdf.extract import available_methods, extract_text_from_bytes
from docextract.validations.file_validators import normalize_mimetype, validate_document
from docextract.word.doc import extract_doc_text
from docextract.word.docx import extract_docx_text

logger = logging.getLogger("docextract.extraction_service")


def is_supported_mimetype(mimetype: str | None) -> bool:
    return normalize_mimetype(mimetype) in SUPPORTED_MIMETYPES


class DocumentExtractionService:
    def __init__(self, cfg: Settings | None = None):
        self.settings = cfg or settings
        self.thresholds = ClassifierThresholds.from_settings(self.settings)

    def extract(self, request: ExtractionRequest) -> ExtractionResult:
        set_context(extraction_id=str(uuid.uuid4()), filename=request.filename)
        t0 = time.time()
        try:
            logger.info(
                "extraction.start",
                extra={"mimetype": request.mimetype, "size_bytes": request.effective_size},
            )

            try:
                mimetype = validate_document(
                    request.content,
                    request.mimetype,
                    request.effective_size,
                    max_mb=self.settings.MAX_FILE_SIZE_MB,
                )
            except AppError as e:
                logger.warning("extraction.rejected", extra={"code": e.code.value, "reason": str(e)})
                return ExtractionResult.failed(e.code, str(e))

            result = self._dispatch(mimetype, request.content)

            logger.info(
                "extraction.done",
                extra={
                    "success": result.success,
                    "code": result.error_code.value if result.error_code else None,
                    "methods_used": list(result.methods_used),
                    "text_chars": len(result.text),
                    "duration_ms": int((time.time() - t0) * 1000),
                },
            )
            return result
        finally:
            clear_extraction_context()

    def _dispatch(self, mimetype: str, content: bytes) -> ExtractionResult:
        if mimetype == PDF_MIMETYPE:
            return extract_text_from_bytes(content, self.settings)

        # Both Word flavours share normalization + classification with the PDF path.
        if mimetype == DOCX_MIMETYPE:
            strategies = [("docx", partial(extract_docx_text, max_bytes=self.settings.MAX_INFLATED_BYTES))]
        else:
            strategies = [("doc", extract_doc_text)]

        return run_strategies(
            content,
            strategies,
            max_length=self.settings.MAX_TEXT_LENGTH,
            thresholds=self.thresholds,
        )

    def capabilities(self) -> dict:
        return {
            "pdf_methods": available_methods(self.settings),
            "mimetypes": list(SUPPORTED_MIMETYPES),
            "max_file_size_mb": self.settings.MAX_FILE_SIZE_MB,
            "max_text_length": self.settings.MAX_TEXT_LENGTH,
        }


def extract_document(
    content: bytes,
    mimetype: str,
    size: int | None = None,
    filename: str | None = None,
    *,
    cfg: Settings | None = None,
) -> ExtractionResult:
    """Convenience wrapper for hosts that just want one call."""
    request = ExtractionRequest(content=content, mimetype=mimetype, size=size, filename=filename)
    return DocumentExtractionService(cfg).extract(request)
