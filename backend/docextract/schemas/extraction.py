"""
extraction.py (schemas)
- Purpose: Response DTOs for the extraction endpoints.
- Design: Mirror the engine's {success, text, error, methodsUsed} contract exactly.
"""

from pydantic import BaseModel, ConfigDict, Field

from docextract.extraction.types import ExtractionResult


class ExtractionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    text: str = ""
    error: str = ""
    error_code: str | None = Field(default=None, alias="errorCode")
    methods_used: list[str] = Field(default_factory=list, alias="methodsUsed")
    filename: str | None = None

    @classmethod
    def from_result(cls, result: ExtractionResult, *, filename: str | None = None) -> "ExtractionResponse":
        """
        DRY mapper from engine result -> response DTO.
        """
        return cls(
            success=result.success,
            text=result.text,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
            methods_used=list(result.methods_used),
            filename=filename,
        )


class CapabilitiesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdf_methods: list[str] = Field(alias="pdfMethods")
    mimetypes: list[str]
    max_file_size_mb: int = Field(alias="maxFileSizeMb")
    max_text_length: int = Field(alias="maxTextLength")
