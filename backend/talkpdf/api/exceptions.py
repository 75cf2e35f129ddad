"""
Custom exceptions for API layer.
Separates business exceptions from HTTP exceptions.
"""
from typing import Optional

from fastapi import HTTPException, status


class TalkPDFError(Exception):
    """Base class for business exceptions raised by the processing backend."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnauthorizedError(TalkPDFError):
    """Raised when the caller cannot be identified from the bearer token."""
    status_code = status.HTTP_401_UNAUTHORIZED


class DocumentNotFoundError(TalkPDFError):
    """Raised when document is not found or not owned by the caller."""
    status_code = status.HTTP_404_NOT_FOUND


class RateLimitExceededError(TalkPDFError):
    """Raised when a user exceeds the processing admission window."""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str = "Rate limit exceeded", retry_after_ms: int = 0):
        super().__init__(message)
        self.retry_after_ms = retry_after_ms

    @property
    def retry_after_seconds(self) -> int:
        # Round up so clients never retry early
        return max(1, -(-self.retry_after_ms // 1000))


class ServiceUnavailableError(TalkPDFError):
    """Raised when processing cannot be accepted (missing configuration, queue down or full)."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ExtractionError(TalkPDFError):
    """Raised when no extraction path yields usable text."""
    pass


class FileProcessingError(TalkPDFError):
    """Raised when the source file cannot be retrieved or processed."""
    pass


def handle_business_exception(e: Exception) -> HTTPException:
    """
    Convert business exceptions to HTTP exceptions.
    This keeps business logic clean of HTTP concerns.
    """
    headers: Optional[dict] = None
    if isinstance(e, RateLimitExceededError):
        headers = {"Retry-After": str(e.retry_after_seconds)}
    if isinstance(e, TalkPDFError):
        return HTTPException(status_code=e.status_code, detail=str(e), headers=headers)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
