"""
Processing Intake - admits processing requests.

Admission is synchronous: rate limit, ownership, status flip, then the job
is handed to the processing queue and the caller gets an immediate answer.
"""
from typing import Any, Dict

from .database.base import DatabaseInterface
from .processing_queue import ProcessingQueue
from ..api.exceptions import DocumentNotFoundError, RateLimitExceededError, ServiceUnavailableError
from ..core import config
from ..middleware.rate_limit import SlidingWindowRateLimiter
from ..models.document import DocumentStatus
from ..core.logging_config import get_logger

logger = get_logger(__name__)

PROCESS_ACTION_KEY = "process-pdf"


class ProcessingIntakeService:
    def __init__(
        self,
        db_service: DatabaseInterface,
        rate_limiter: SlidingWindowRateLimiter,
        queue: ProcessingQueue,
        window_ms: int = None,
        max_requests: int = None
    ):
        self.db_service = db_service
        self.rate_limiter = rate_limiter
        self.queue = queue
        self.window_ms = window_ms or config.PROCESS_RATE_LIMIT_WINDOW_MS
        self.max_requests = max_requests or config.PROCESS_RATE_LIMIT_MAX_REQUESTS

    async def admit(self, user_id: str, document_id: str, language: str) -> Dict[str, Any]:
        """
        Admit a document for background processing.

        Args:
            user_id: Authenticated caller
            document_id: Document to process
            language: Validated narration language code

        Returns:
            {"success", "documentId", "status", "message"}

        Raises:
            RateLimitExceededError: Caller exceeded the admission window
            DocumentNotFoundError: Document missing or owned by someone else
            ServiceUnavailableError: Processing queue not accepting jobs
        """
        decision = self.rate_limiter.allow(user_id, PROCESS_ACTION_KEY, self.window_ms, self.max_requests)
        if not decision.allowed:
            raise RateLimitExceededError(
                "Too many requests. Please try again later.",
                retry_after_ms=decision.reset_in_ms
            )

        record = await self.db_service.get_owned_document(document_id, user_id)
        if record is None:
            logger.warning(f"Document {document_id} not found for user {user_id}")
            raise DocumentNotFoundError("Unable to access document")

        previous_status = record.get("status")
        await self.db_service.update_owned_document(document_id, user_id, {
            "status": DocumentStatus.PROCESSING.value,
            "audio_language": language,
        })

        try:
            self.queue.submit(document_id, user_id, language)
        except ServiceUnavailableError:
            await self.db_service.update_owned_document(document_id, user_id, {"status": previous_status})
            raise

        logger.info(f"Admitted document {document_id} for processing ({language}, {decision.remaining} left)")
        return {
            "success": True,
            "documentId": document_id,
            "status": DocumentStatus.PROCESSING.value,
            "message": "Document processing started",
        }
