"""
extractions.py
- Purpose: API routes for turning an uploaded course document into plain text.
- Design: Keep router thin. Delegate extraction to DocumentExtractionService.
"""

from fastapi import APIRouter, Depends, File, Response, UploadFile

from docextract.api.deps import get_extraction_service, get_settings
from docextract.core.config import Settings
from docextract.core.errors import STATUS_BY_CODE, file_too_large
from docextract.extraction.types import ExtractionRequest
from docextract.schemas.extraction import CapabilitiesResponse, ExtractionResponse
from docextract.services.extraction_service import DocumentExtractionService
from docextract.validations.file_validators import BYTES_PER_MB

router = APIRouter(prefix="/api/extractions", tags=["Extractions"])

_CHUNK_SIZE = 1024 * 1024


def _read_upload(file: UploadFile, max_mb: int) -> bytes:
    # Size enforcement happens during the streaming read because UploadFile
    # doesn't reliably expose size; oversized uploads never reach a parser.
    limit = max_mb * BYTES_PER_MB
    buf = bytearray()
    while True:
        chunk = file.file.read(_CHUNK_SIZE)
        if not chunk:
            break
        buf += chunk
        if len(buf) > limit:
            raise file_too_large(max_mb, details={"filename": file.filename})
    return bytes(buf)


@router.post("", response_model=ExtractionResponse)
def extract_upload(
    response: Response,
    file: UploadFile = File(...),
    cfg: Settings = Depends(get_settings),
    svc: DocumentExtractionService = Depends(get_extraction_service),
):
    content = _read_upload(file, cfg.MAX_FILE_SIZE_MB)
    result = svc.extract(
        ExtractionRequest(
            content=content,
            mimetype=file.content_type or "",
            size=len(content),
            filename=file.filename,
        )
    )
    if not result.success:
        response.status_code = STATUS_BY_CODE.get(result.error_code, 400)
    return ExtractionResponse.from_result(result, filename=file.filename)


@router.get("/methods", response_model=CapabilitiesResponse)
def get_extraction_methods(svc: DocumentExtractionService = Depends(get_extraction_service)):
    """Which PDF strategies can run on this host, plus the active limits."""
    return CapabilitiesResponse(**svc.capabilities())
