"""
Document Ingestion API Router
POST /upload

Request lifecycle:
  ┌─────────────────────────────────────────────────────────┐
  │ 1. X-Api-Key check (when keys are configured)           │
  │ 2. Base64 decode + format validation                    │
  │ 3. S3 put (<document_id>-<file name>)                   │
  │ 4. Text extraction (direct / inline OCR / S3 OCR)       │
  │ 5. Bedrock summary                                      │
  │ 6. 200 with extracted text + summary                    │
  └─────────────────────────────────────────────────────────┘

Status codes come from the failure kind, never from the message text:
  ClassifiedFailure (caller-fixable) → 400, error = actionable message
  ClassifiedFailure (service side)   → 500, error = "Server processing error"
  anything else                      → 500, error = "Server processing error"
`details` always carries the raw message for diagnostics.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from pdfgenie.api.deps import Ingestion, require_api_key
from pdfgenie.core.errors import ClassifiedFailure
from pdfgenie.schemas.documents import ErrorResponse, UploadRequest, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Document Ingestion"], dependencies=[Depends(require_api_key)])

SERVER_ERROR_MESSAGE = "Server processing error"


def failure_response(failure: ClassifiedFailure) -> JSONResponse:
    """Render a ClassifiedFailure as the public error envelope."""
    code = failure.status_code
    body = ErrorResponse(
        error=failure.message if code < 500 else SERVER_ERROR_MESSAGE,
        details=failure.cause_detail or failure.message,
    )
    return JSONResponse(status_code=code, content=body.model_dump(exclude_none=True))


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a document, extract its text and summarize it",
    description=(
        "Accepts PDF, TXT, JPG/JPEG, PNG and TIF/TIFF files as base64. "
        "Returns the extracted text and an AI-generated summary."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid, unsupported, empty, too large or unreadable file"},
        403: {"model": ErrorResponse, "description": "Missing or unknown API key"},
        500: {"model": ErrorResponse, "description": "Extraction service or summarization failure"},
    },
)
async def upload_document(payload: UploadRequest, service: Ingestion):
    try:
        return await service.ingest(payload.file_name, payload.file_base64)
    except ClassifiedFailure as failure:
        logger.warning(
            "Upload rejected | file=%s kind=%s status=%d message=%s",
            payload.file_name, failure.kind.value, failure.status_code, failure.message,
        )
        return failure_response(failure)
    except Exception as exc:
        logger.exception("Upload/processing error | file=%s", payload.file_name)
        body = ErrorResponse(error=SERVER_ERROR_MESSAGE, details=str(exc) or "Unknown error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(exclude_none=True),
        )
