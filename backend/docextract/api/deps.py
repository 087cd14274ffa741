from fastapi import Depends

from docextract.core.config import Settings, settings
from docextract.services.extraction_service import DocumentExtractionService


def get_settings() -> Settings:
    """
    Provides the active settings.
    Using Depends(get_settings) lets tests override limits via dependency_overrides.
    """
    return settings


def get_extraction_service(cfg: Settings = Depends(get_settings)) -> DocumentExtractionService:
    """
    Service dependency for extraction flows.
    One service per request; it holds no state between calls.
    """
    return DocumentExtractionService(cfg)
