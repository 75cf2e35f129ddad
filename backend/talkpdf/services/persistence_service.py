"""
Persistence & Accounting Stage.

Uploads narration audio, writes every result field back to the document
with status "ready", then records usage and refreshes the daily summary.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .database.base import DatabaseInterface
from .storage.base import FileStorageInterface
from .tts.engine import TTSResult
from .usage_service import UsageService, utc_now
from ..api.exceptions import DocumentNotFoundError
from ..models.document import DocumentStatus, PageContent, StudyPrompt, TTSMetadata, UsageAction
from ..core.logging_config import get_logger

logger = get_logger(__name__)

# Narration speed used for the advisory duration estimate
WORDS_PER_SECOND = 2.5


def estimate_duration_seconds(script: str) -> int:
    """Approximate narration length from word count (not measured from audio)."""
    return round(len(script.split()) / WORDS_PER_SECOND)


def audio_storage_path(user_id: str, document_id: str, audio_format: str) -> str:
    return f"{user_id}/{document_id}/audio.{audio_format}"


@dataclass
class PipelineOutput:
    """Everything the stages produced for one document run."""
    document_id: str
    user_id: str
    language: str
    file_type: str
    summary: str
    study_prompts: List[StudyPrompt]
    page_contents: List[PageContent]
    script: str
    translation_applied: bool
    tts: TTSResult
    plan_name: Optional[str] = None
    plan_limits_version: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class PersistenceService:
    def __init__(
        self,
        db_service: DatabaseInterface,
        storage: FileStorageInterface,
        usage_service: UsageService,
        clock=utc_now
    ):
        self.db_service = db_service
        self.storage = storage
        self.usage_service = usage_service
        self._clock = clock

    async def finalize(self, output: PipelineOutput) -> Dict[str, Any]:
        """
        Store audio, mark the document ready and account for usage.

        Audio upload failure is recorded as a warning; the document is still
        marked ready without audio.

        Returns:
            The updated document record

        Raises:
            DocumentNotFoundError: If the document no longer belongs to the user
        """
        tts = output.tts
        audio_path: Optional[str] = None
        duration_seconds: Optional[int] = None

        if tts.audio is not None:
            path = audio_storage_path(output.user_id, output.document_id, tts.audio_format or "mp3")
            try:
                audio_path = await self.storage.save_bytes(tts.audio, path, tts.content_type or "audio/mpeg")
                duration_seconds = estimate_duration_seconds(output.script)
                logger.info(f"Audio uploaded to {audio_path} (~{duration_seconds}s)")
            except Exception as e:
                logger.error(f"Audio upload failed for document {output.document_id}: {e}", exc_info=True)
                output.warnings.append(f"audio upload failed: {type(e).__name__}")

        metadata = TTSMetadata(
            tts_provider=tts.provider,
            requested_language=output.language,
            translation_applied=output.translation_applied,
            failed_providers=list(tts.failed_providers),
            tts_text_length=len(output.script),
            tts_text_preview=output.script[:100],
            audio_size_bytes=len(tts.audio) if tts.audio is not None else 0,
            chunks_generated=tts.chunks_generated,
            processed_at=self._clock().isoformat(),
            voice_used=tts.voice,
            file_type=output.file_type,
            plan=output.plan_name,
            plan_limits_version=output.plan_limits_version,
            pipeline_warnings=list(output.warnings),
        )

        updates = {
            "status": DocumentStatus.READY.value,
            "summary": output.summary,
            "study_prompts": [prompt.model_dump() for prompt in output.study_prompts],
            "page_contents": [page.model_dump() for page in output.page_contents],
            "page_count": len(output.page_contents) or None,
            "audio_url": audio_path,
            "audio_duration_seconds": duration_seconds,
            "audio_language": output.language,
            "tts_metadata": metadata.model_dump(),
        }
        record = await self.db_service.update_owned_document(output.document_id, output.user_id, updates)
        if record is None:
            raise DocumentNotFoundError(f"Document {output.document_id} no longer available for update")

        await self._account(output, audio_path is not None, duration_seconds or 0)
        logger.info(
            f"✅ Document {output.document_id} ready (provider: {tts.provider}, "
            f"audio: {'yes' if audio_path else 'no'})"
        )
        return record

    async def _account(self, output: PipelineOutput, audio_stored: bool, duration_seconds: int) -> None:
        await self.usage_service.record_once(
            output.user_id,
            UsageAction.PDF_UPLOAD,
            output.document_id,
            metadata={"file_type": output.file_type}
        )
        if audio_stored and duration_seconds > 0:
            await self.usage_service.record_once(
                output.user_id,
                UsageAction.AUDIO_CONVERSION,
                output.document_id,
                audio_minutes=duration_seconds / 60,
                metadata={"tts_provider": output.tts.provider}
            )
        await self.usage_service.recompute_daily_summary(output.user_id)
