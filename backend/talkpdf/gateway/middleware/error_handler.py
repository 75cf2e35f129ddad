"""
Error Handling

- talkpdf_exception_handler renders TalkPDFError subclasses (401/404/429/503)
  as {"error", "status_code", "path", "request_id"}, plus retryAfter and a
  Retry-After header for rate-limit rejections.
- ErrorHandlingMiddleware turns anything unexpected into a 500 JSON body.
"""
import traceback

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ...api.exceptions import RateLimitExceededError, TalkPDFError, handle_business_exception
from ...core import config
from ...core.logging_config import get_logger
from .request_id import get_request_id

logger = get_logger(__name__)


def error_body(request: Request, message, status_code: int) -> dict:
    return {
        "error": message,
        "status_code": status_code,
        "path": request.url.path,
        "request_id": get_request_id(request),
    }


async def talkpdf_exception_handler(request: Request, exc: TalkPDFError) -> JSONResponse:
    """Exception handler registered on the app for business exceptions."""
    http_exception = handle_business_exception(exc)
    body = error_body(request, http_exception.detail, http_exception.status_code)
    if isinstance(exc, RateLimitExceededError):
        body["retryAfter"] = exc.retry_after_seconds

    log = logger.error if http_exception.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} → {http_exception.status_code}: {http_exception.detail}")
    return JSONResponse(
        status_code=http_exception.status_code,
        content=body,
        headers=http_exception.headers
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Last-resort handler for exceptions no route or exception handler caught.
    Tracebacks are only included outside production.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            is_development = config.ENVIRONMENT != "production"
            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)

            body = error_body(
                request,
                str(e) if is_development else "Internal server error",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )
            if is_development:
                body["traceback"] = traceback.format_exc()
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
