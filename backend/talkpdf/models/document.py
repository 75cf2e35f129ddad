from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum


class DocumentStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class UsageAction(str, Enum):
    PDF_UPLOAD = "pdf_upload"
    AUDIO_CONVERSION = "audio_conversion"
    EXPLAIN_BACK = "explain_back"
    AI_QUESTION = "ai_question"


class PageContent(BaseModel):
    page_number: int
    text: str
    chapter: Optional[str] = None


class StudyPrompt(BaseModel):
    topic: str
    prompt: str


class TTSMetadata(BaseModel):
    """Diagnostic record persisted with every processed document."""
    tts_provider: str = "none"
    requested_language: str = "en"
    translation_applied: bool = False
    failed_providers: List[str] = Field(default_factory=list)
    tts_text_length: int = 0
    tts_text_preview: str = ""
    audio_size_bytes: int = 0
    chunks_generated: int = 0
    processed_at: str
    voice_used: Optional[str] = None
    file_type: str = "pdf"
    plan: Optional[str] = None
    plan_limits_version: Optional[str] = None
    pipeline_warnings: List[str] = Field(default_factory=list)


class DocumentMetadata(BaseModel):
    id: str
    user_id: str
    file_name: str
    file_url: Optional[str] = None  # storage path of the uploaded source
    file_size: Optional[int] = None
    status: DocumentStatus = DocumentStatus.UPLOADED
    summary: Optional[str] = None
    study_prompts: Optional[List[StudyPrompt]] = None
    page_contents: Optional[List[PageContent]] = None
    page_count: Optional[int] = None
    audio_url: Optional[str] = None
    audio_duration_seconds: Optional[int] = None
    audio_language: Optional[str] = None
    tts_metadata: Optional[TTSMetadata] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DailyUsageSummary(BaseModel):
    user_id: str
    date: str  # YYYY-MM-DD (UTC)
    pdfs_uploaded: int = 0
    audio_minutes_used: float = 0.0
    explain_back_count: int = 0
    ai_questions_asked: int = 0
