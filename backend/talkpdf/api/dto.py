"""
Data Transfer Objects (DTOs) for API layer.
Separates API contracts from domain entities.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from ..core.voices import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


class ProcessDocumentRequest(BaseModel):
    """Body of a processing request: {documentId, language?}."""
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(alias="documentId", min_length=1, max_length=128)
    language: str = DEFAULT_LANGUAGE

    @field_validator("language")
    @classmethod
    def check_language(cls, value: str) -> str:
        value = (value or DEFAULT_LANGUAGE).strip().lower()
        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language '{value}'. Supported: {', '.join(sorted(SUPPORTED_LANGUAGES))}"
            )
        return value


class ProcessDocumentResponse(BaseModel):
    """Immediate response once a document has been admitted for processing."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    document_id: str = Field(alias="documentId")
    status: str = "processing"
    message: Optional[str] = None
