# docextract/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "CourseDocExtract"
    env: str = "local"

    # =========================
    # Upload limits (host-supplied)
    # =========================
    MAX_FILE_SIZE_MB: int = 50
    MAX_TEXT_LENGTH: int = 15000

    # =========================
    # PDF cascade
    # =========================
    PDFTOTEXT_BINARY: str = "pdftotext"
    EXTERNAL_TOOL_TIMEOUT_SECONDS: int = 60
    ENABLE_EXTERNAL_TOOL: bool = True
    ENABLE_LIBRARY: bool = True

    # Structured/raw stream strategies reject anything thinner than this
    STREAM_MIN_CHARS: int = 50

    # Ceiling on decompressed bytes per document (inflated PDF streams,
    # the DOCX main part)
    MAX_INFLATED_BYTES: int = 64 * 1024 * 1024

    # =========================
    # Validity classifier (empirical, tune against a real corpus)
    # =========================
    CLASSIFIER_MIN_CHARS: int = 100
    CLASSIFIER_MAX_METADATA_HITS: int = 2
    CLASSIFIER_MAX_NONPRINTABLE_RATIO: float = 0.10
    CLASSIFIER_MIN_WORDS: int = 20
    CLASSIFIER_MIN_MEAN_WORD_LENGTH: float = 2.0
    CLASSIFIER_MAX_MEAN_WORD_LENGTH: float = 12.0

    # HTTP
    CORS_ALLOW_ORIGINS: str | None = None

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
