"""
Request Logging Middleware

Logs each request and its outcome with timing and request id.
"""
import time
from typing import Callable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...core.logging_config import get_logger
from .request_id import get_request_id

logger = get_logger(__name__)

DEFAULT_SKIP_PATHS = ["/health", "/ready", "/docs", "/redoc", "/openapi.json"]


def _status_marker(status_code: int) -> str:
    if status_code < 400:
        return "✅"
    if status_code < 500:
        return "⚠️"
    return "❌"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs "→ METHOD path" on entry and "METHOD path → status (ms)" on exit.
    Probe and docs paths are skipped.
    """

    def __init__(self, app, skip_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.skip_paths = skip_paths or DEFAULT_SKIP_PATHS

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if any(request.url.path.startswith(path) for path in self.skip_paths):
            return await call_next(request)

        request_id = get_request_id(request)
        tag = f" [{request_id}]" if request_id else ""
        method = request.method
        path = request.url.path
        started = time.perf_counter()

        logger.info(f"→ {method} {path}{tag}")
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"❌ {method} {path} → {type(e).__name__} after {elapsed_ms:.2f}ms{tag}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{_status_marker(response.status_code)} {method} {path} → "
            f"{response.status_code} ({elapsed_ms:.2f}ms){tag}"
        )
        return response
