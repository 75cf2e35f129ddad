"""
Document Processing Service - runs the narration pipeline for one document.

Stages run sequentially: extract -> summarize -> (translate) -> synthesize ->
persist. Any run that does not reach the end leaves the document in "error".
"""
from typing import Any, Dict

from .database.base import DatabaseInterface
from .storage.base import FileStorageInterface
from .extraction_service import ExtractionService
from .summarization_service import SummarizationService
from .translation_service import TranslationService
from .persistence_service import PersistenceService, PipelineOutput
from .tts.audio_utils import normalize_script
from .tts.engine import TTSFallbackEngine, TTSResult
from ..api.exceptions import DocumentNotFoundError, FileProcessingError
from ..core.plans import PLAN_LIMITS_VERSION, resolve_plan
from ..domain.entities import Document
from ..models.document import DocumentStatus
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class DocumentProcessingService:
    """
    Orchestrates the pipeline stages for an admitted document.
    """

    def __init__(
        self,
        db_service: DatabaseInterface,
        storage: FileStorageInterface,
        extraction_service: ExtractionService,
        summarization_service: SummarizationService,
        translation_service: TranslationService,
        tts_engine: TTSFallbackEngine,
        persistence_service: PersistenceService
    ):
        self.db_service = db_service
        self.storage = storage
        self.extraction_service = extraction_service
        self.summarization_service = summarization_service
        self.translation_service = translation_service
        self.tts_engine = tts_engine
        self.persistence_service = persistence_service

    async def process_document(self, document_id: str, user_id: str, language: str) -> Dict[str, Any]:
        """
        Process a document end to end.

        Args:
            document_id: Document to process
            user_id: Authenticated owner
            language: Narration language code

        Returns:
            Dict with "status" ("success" or "error") and document details
        """
        completed = False
        owned = False
        try:
            record = await self.db_service.get_owned_document(document_id, user_id)
            if record is None:
                raise DocumentNotFoundError(f"Document {document_id} not found for user {user_id}")
            document = Document.from_record(record)
            owned = True

            await self.db_service.update_owned_document(
                document_id, user_id, {"status": DocumentStatus.PROCESSING.value}
            )

            plan = resolve_plan(await self.db_service.get_user_plan(user_id))
            logger.info(f"Processing {document.file_name} ({document.file_type}) for plan '{plan.name}'")

            file_bytes = await self._download(document)

            extraction = await self.extraction_service.extract(
                file_bytes, document.file_name, document.content_type, plan
            )
            warnings = []

            summary = await self.summarization_service.summarize(extraction.text, plan)
            if summary.degraded:
                warnings.append("summary fallback")

            translation = await self.translation_service.translate(summary.summary, language, plan)
            if translation.reason in ("provider error", "output too short"):
                warnings.append(f"translation fallback: {translation.reason}")

            script = normalize_script(translation.text, plan.max_tts_chars)
            tts = await self._synthesize(script, language, plan)

            await self.persistence_service.finalize(PipelineOutput(
                document_id=document_id,
                user_id=user_id,
                language=language,
                file_type=document.file_type,
                summary=summary.summary,
                study_prompts=summary.study_prompts,
                page_contents=extraction.page_contents,
                script=script,
                translation_applied=translation.applied,
                tts=tts,
                plan_name=plan.name,
                plan_limits_version=PLAN_LIMITS_VERSION,
                warnings=warnings,
            ))
            completed = True
            return {
                "status": "success",
                "document_id": document_id,
                "tts_provider": tts.provider,
            }
        except Exception as e:
            logger.error(f"❌ Processing failed for document {document_id}: {e}", exc_info=True)
            return {"status": "error", "document_id": document_id, "error": str(e)}
        finally:
            if not completed:
                await self._mark_failed(document_id, user_id, owned)

    async def _download(self, document: Document) -> bytes:
        try:
            return await self.storage.get_file(document.file_url)
        except Exception as e:
            raise FileProcessingError(f"Failed to download {document.file_url}: {e}") from e

    async def _synthesize(self, script: str, language: str, plan) -> TTSResult:
        try:
            return await self.tts_engine.synthesize(script, language, plan)
        except Exception as e:
            logger.error(f"Speech synthesis crashed, continuing without audio: {e}", exc_info=True)
            return TTSResult()

    async def _mark_failed(self, document_id: str, user_id: str, owned: bool) -> None:
        """
        Force a run that did not complete into "error".

        Without confirmed ownership (lookup failed or the row changed hands
        since admission) only a row still left in "processing" is touched.
        """
        failed = {"status": DocumentStatus.ERROR.value}
        try:
            if owned:
                await self.db_service.update_owned_document(document_id, user_id, failed)
            else:
                await self.db_service.update_document_in_status(
                    document_id, DocumentStatus.PROCESSING.value, failed
                )
        except Exception as e:
            logger.error(f"Could not mark document {document_id} as error: {e}", exc_info=True)
