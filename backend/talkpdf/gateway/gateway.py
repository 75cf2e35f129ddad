"""
API Gateway

Builds the FastAPI application: middleware, exception handlers, the
per-client rate limiter and health endpoints. Routers are registered by
talkpdf.main.
"""
from typing import List, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from ..api.exceptions import TalkPDFError
from ..core import config
from ..core.logging_config import get_logger
from ..middleware.rate_limit import limiter
from .middleware import (
    ErrorHandlingMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    talkpdf_exception_handler
)

logger = get_logger(__name__)


class APIGateway:
    """
    Single entry point for all API requests.

    Responsibilities:
    - Initialize the FastAPI application
    - Register middleware (CORS, rate limiting, logging, error handling)
    - Register routers under one or more prefixes
    - Provide health check endpoints
    """

    def __init__(
        self,
        title: str = "TalkPDF API",
        description: str = "Turns uploaded study documents into summaries, study prompts and narrated audio",
        version: str = "1.0.0",
        enable_docs: Optional[bool] = None
    ):
        self.title = title
        self.version = version
        self.enable_docs = enable_docs if enable_docs is not None else config.ENVIRONMENT != "production"
        self.prefixes: List[str] = []

        self.app = FastAPI(
            title=title,
            description=description,
            version=version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None
        )

        self.app.state.limiter = limiter
        self.app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
        self.app.add_exception_handler(TalkPDFError, talkpdf_exception_handler)

        logger.info("API Gateway initialized")

    def setup_middleware(self):
        """Configure all middleware (last added runs first)."""
        logger.info("Setting up middleware...")

        self.app.add_middleware(ErrorHandlingMiddleware)
        self.app.add_middleware(SlowAPIMiddleware)
        self.app.add_middleware(RequestLoggingMiddleware)
        self.app.add_middleware(RequestIDMiddleware)
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.debug(f"  → CORS origins: {', '.join(config.CORS_ORIGINS)}")
        logger.info(
            f"✅ All middleware configured (client rate limit: "
            f"{'on' if config.RATE_LIMIT_ENABLED else 'off'})"
        )

    def register_router(self, router: APIRouter, prefixes: Optional[List[str]] = None, tags: Optional[List[str]] = None):
        """
        Register a router at each prefix.

        Args:
            router: FastAPI router instance
            prefixes: URL prefixes (e.g. ["/api/v1", ""]); defaults to unprefixed
            tags: OpenAPI tags for documentation
        """
        for prefix in prefixes or [""]:
            # Only the first mount appears in the OpenAPI schema
            self.app.include_router(
                router,
                prefix=prefix,
                tags=tags or [],
                include_in_schema=prefix == (prefixes or [""])[0]
            )
            if prefix not in self.prefixes:
                self.prefixes.append(prefix)
            logger.info(f"Registered router at prefix '{prefix or '/'}'")

    def register_health_endpoints(self):
        """Register /, /health and /ready."""

        @self.app.get("/")
        async def root():
            return {
                "message": f"{self.title} is running",
                "version": self.version,
                "status": "healthy",
                "prefixes": [p for p in self.prefixes if p],
            }

        @self.app.get("/health")
        async def health_check():
            """Liveness: services are initialized."""
            from ..routers import dependencies

            if dependencies.db_service is None or dependencies.intake_service is None:
                logger.warning("Health check failed: services not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "reason": "Services not initialized"}
                )
            return {"status": "healthy", "database": type(dependencies.db_service).__name__}

        @self.app.get("/ready")
        async def readiness_check():
            """Readiness: the processing worker pool accepts jobs."""
            from ..routers import dependencies

            queue = dependencies.get_processing_queue()
            if dependencies.db_service is None or queue is None or not queue.is_running:
                logger.warning("Readiness check failed: processing workers not running")
                return JSONResponse(
                    status_code=503,
                    content={"ready": False, "reason": "Processing workers not running"}
                )
            return {"ready": True, "queue": queue.get_stats()}

        logger.info("Health check endpoints registered")

    def get_app(self) -> FastAPI:
        return self.app
