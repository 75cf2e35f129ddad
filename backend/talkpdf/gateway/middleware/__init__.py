"""
Gateway Middleware Module

Request id tagging, request logging and error handling.
"""
from .request_logging import RequestLoggingMiddleware
from .error_handler import ErrorHandlingMiddleware, talkpdf_exception_handler
from .request_id import RequestIDMiddleware, get_request_id

__all__ = [
    "RequestLoggingMiddleware",
    "ErrorHandlingMiddleware",
    "RequestIDMiddleware",
    "talkpdf_exception_handler",
    "get_request_id",
]
