"""
Shared dependencies for routers.
Provides service initialization, lookup and shutdown.

Services are module globals built once on startup and shared across all
request handlers and processing workers.
"""
from typing import Optional

import httpx
from fastapi import Header

from ..api.exceptions import ServiceUnavailableError, UnauthorizedError
from ..core import config
from ..middleware.rate_limit import SlidingWindowRateLimiter
from ..services.ai_service import AIService
from ..services.auth_service import AuthService, create_auth_service
from ..services.database import DatabaseFactory
from ..services.document_processing_service import DocumentProcessingService
from ..services.extraction_service import ExtractionService
from ..services.intake_service import ProcessingIntakeService
from ..services.persistence_service import PersistenceService
from ..services.processing_queue import ProcessingJob, ProcessingQueue
from ..services.storage import FileStorageFactory
from ..services.summarization_service import SummarizationService
from ..services.translation_service import TranslationService
from ..services.tts import SpeechProviderFactory, TTSFallbackEngine
from ..services.usage_service import UsageService
from ..core.logging_config import get_logger

logger = get_logger(__name__)

# Global services (initialized on startup)
db_service = None
storage_service = None
auth_service: Optional[AuthService] = None
ai_service: Optional[AIService] = None
tts_http_client: Optional[httpx.AsyncClient] = None
usage_service: Optional[UsageService] = None
document_processing_service: Optional[DocumentProcessingService] = None
processing_queue: Optional[ProcessingQueue] = None
rate_limiter: Optional[SlidingWindowRateLimiter] = None
intake_service: Optional[ProcessingIntakeService] = None


async def initialize_database():
    """Initialize database adapter based on configuration."""
    global db_service

    logger.info(f"Initializing database: {config.DATABASE_TYPE}")
    db_service = await DatabaseFactory.create_and_initialize(config.DATABASE_TYPE)
    logger.info(f"  ✅ {type(db_service).__name__} initialized")


async def initialize_services():
    """
    Initialize all services after the database is ready.

    Sets up storage, auth, the AI and speech providers, the pipeline stages
    and the processing worker pool.
    """
    global storage_service, auth_service, ai_service, tts_http_client, usage_service
    global document_processing_service, processing_queue, rate_limiter, intake_service

    if db_service is None:
        await initialize_database()

    logger.info("Initializing services...")

    logger.info(f"  → Storage Type: {config.STORAGE_TYPE}")
    storage_service = await FileStorageFactory.create_and_initialize(config.STORAGE_TYPE)

    logger.info(f"  → Auth Provider: {config.AUTH_PROVIDER}")
    auth_service = create_auth_service()

    logger.info(f"  → AI Provider: {config.AI_PROVIDER}")
    ai_service = AIService()

    logger.info(f"  → Speech providers (order: {', '.join(config.TTS_PROVIDER_ORDER)})")
    tts_http_client = httpx.AsyncClient(timeout=config.TTS_TIMEOUT_SECONDS)
    tts_engine = TTSFallbackEngine(SpeechProviderFactory.create_providers(http_client=tts_http_client))

    usage_service = UsageService(db_service)
    document_processing_service = DocumentProcessingService(
        db_service=db_service,
        storage=storage_service,
        extraction_service=ExtractionService(ai_service),
        summarization_service=SummarizationService(ai_service),
        translation_service=TranslationService(ai_service),
        tts_engine=tts_engine,
        persistence_service=PersistenceService(db_service, storage_service, usage_service),
    )

    processing_queue = ProcessingQueue(
        max_workers=config.MAX_PROCESSING_WORKERS,
        max_size=config.PROCESSING_QUEUE_SIZE
    )
    await processing_queue.start(run_processing_job)

    rate_limiter = SlidingWindowRateLimiter()
    intake_service = ProcessingIntakeService(db_service, rate_limiter, processing_queue)

    logger.info("✅ All services initialized successfully")


async def run_processing_job(job: ProcessingJob) -> dict:
    """Worker entry point: run the pipeline for one admitted job."""
    return await document_processing_service.process_document(job.document_id, job.user_id, job.language)


async def shutdown_services():
    """Drain the worker pool and release connections."""
    global processing_queue, tts_http_client

    if processing_queue is not None:
        await processing_queue.stop()
    if tts_http_client is not None:
        await tts_http_client.aclose()
        tts_http_client = None
    if storage_service is not None:
        await storage_service.close()
    if db_service is not None:
        await db_service.close()
    logger.info("All services shut down")


def get_db_service():
    """Get database service (dependency injection)."""
    if db_service is None:
        raise ServiceUnavailableError("Database service not initialized")
    return db_service


def get_usage_service() -> UsageService:
    if usage_service is None:
        raise ServiceUnavailableError("Usage service not initialized")
    return usage_service


def get_intake_service() -> ProcessingIntakeService:
    if intake_service is None:
        raise ServiceUnavailableError("Processing service not initialized")
    return intake_service


def get_processing_queue() -> Optional[ProcessingQueue]:
    return processing_queue


async def get_current_user(authorization: Optional[str] = Header(default=None)) -> str:
    """
    Resolve the caller from the Authorization header.

    Raises:
        UnauthorizedError: Missing, malformed or rejected bearer token
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise UnauthorizedError("Missing authorization header")
    if auth_service is None:
        raise ServiceUnavailableError("Auth service not initialized")

    user_id = await auth_service.get_user_id(token)
    if not user_id:
        raise UnauthorizedError("Unauthorized")
    return user_id
