"""
Processing Router - admits documents into the narration pipeline.

Endpoints:
    POST /process-document - Admit {documentId, language?} for processing
    POST /documents/{document_id}/process - Same, language as query param
    GET /documents/{document_id} - Poll the caller's document
    GET /usage/daily - Caller's usage summary for a UTC day

Every endpoint requires "Authorization: Bearer <token>". Business errors
(401/404/429/503) are raised as TalkPDFError and rendered by the gateway.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..api.dto import ProcessDocumentRequest, ProcessDocumentResponse
from ..api.exceptions import DocumentNotFoundError
from ..core.voices import DEFAULT_LANGUAGE
from ..models.document import DailyUsageSummary, DocumentMetadata
from .dependencies import get_current_user, get_db_service, get_intake_service, get_usage_service
from ..core.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/process-document", response_model=ProcessDocumentResponse, response_model_by_alias=True)
async def process_document(
    request: ProcessDocumentRequest,
    user_id: str = Depends(get_current_user)
):
    """
    Admit a document for background processing.

    Returns immediately with status "processing"; poll GET /documents/{id}
    until it becomes "ready" or "error".

    Status Codes:
        200: Admitted
        401: Missing or invalid bearer token
        404: Document not found for this user
        422: Malformed body or unsupported language
        429: Too many processing requests (see Retry-After)
        503: Processing workers unavailable
    """
    logger.info(f"Processing request for document {request.document_id} ({request.language})")
    return await get_intake_service().admit(user_id, request.document_id, request.language)


@router.post(
    "/documents/{document_id}/process",
    response_model=ProcessDocumentResponse,
    response_model_by_alias=True
)
async def reprocess_document(
    document_id: str,
    language: str = Query(DEFAULT_LANGUAGE),
    user_id: str = Depends(get_current_user)
):
    """Re-run processing for a document (e.g. regenerate audio in another language)."""
    try:
        request = ProcessDocumentRequest(document_id=document_id, language=language)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_context=False))
    return await get_intake_service().admit(user_id, request.document_id, request.language)


@router.get("/documents/{document_id}", response_model=DocumentMetadata)
async def get_document(document_id: str, user_id: str = Depends(get_current_user)):
    """Get the caller's document, including processing status and results."""
    record = await get_db_service().get_owned_document(document_id, user_id)
    if record is None:
        raise DocumentNotFoundError("Unable to access document")
    return record


@router.get("/usage/daily", response_model=DailyUsageSummary)
async def get_daily_usage(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(get_current_user)
):
    """Usage totals for one UTC day (defaults to today)."""
    usage_service = get_usage_service()
    return await usage_service.get_daily_summary(user_id, day or usage_service.today())
