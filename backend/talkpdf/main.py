import sys

import fastapi

from .gateway import APIGateway
from .routers import processing
from .routers.dependencies import initialize_database, initialize_services, shutdown_services
from .core import config
from .core.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)

API_PREFIXES = ["/api/v1", ""]

gateway = APIGateway()
gateway.setup_middleware()

# Mounted under /api/v1 and unprefixed for existing clients
gateway.register_router(processing.router, prefixes=API_PREFIXES, tags=["Processing"])
gateway.register_health_endpoints()

app = gateway.get_app()


@app.on_event("startup")
async def startup_event():
    """Initialize services and start the processing workers."""
    logger.info("=" * 60)
    logger.info("Starting TalkPDF Backend...")
    logger.info("=" * 60)

    logger.info(f"  → FastAPI Version: {fastapi.__version__}")
    logger.info(f"  → Python Version: {sys.version.split()[0]}")
    logger.info(f"  → Environment: {config.ENVIRONMENT}")
    logger.info(f"  → Docs URL: {app.docs_url or 'Disabled (production)'}")

    logger.info("Processing Admission:")
    logger.info(
        f"  → {config.PROCESS_RATE_LIMIT_MAX_REQUESTS} requests per "
        f"{config.PROCESS_RATE_LIMIT_WINDOW_MS // 1000}s per user"
    )
    logger.info(f"  → Workers: {config.MAX_PROCESSING_WORKERS}, queue size: {config.PROCESSING_QUEUE_SIZE}")

    await initialize_database()
    await initialize_services()

    logger.info("=" * 60)
    logger.info("✅ TalkPDF Backend initialized successfully")
    logger.info("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    """Drain queued jobs and close connections."""
    logger.info("Shutting down TalkPDF Backend...")
    await shutdown_services()
    logger.info("TalkPDF Backend shutdown complete")
