"""
Q&A API Router
POST /process

The client sends back the `extractedText` it received from /upload together
with its question; nothing is looked up server-side.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from pdfgenie.api.deps import QA, require_api_key
from pdfgenie.schemas.documents import AskRequest, AskResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Q&A"], dependencies=[Depends(require_api_key)])


@router.post(
    "/process",
    response_model=AskResponse,
    summary="Answer a question about previously extracted text",
    responses={
        400: {"model": ErrorResponse, "description": "extractedText or question missing"},
        403: {"model": ErrorResponse, "description": "Missing or unknown API key"},
        500: {"model": ErrorResponse, "description": "Text generation failure"},
    },
)
async def ask_question(payload: AskRequest, service: QA):
    if not payload.extracted_text or not payload.question:
        body = ErrorResponse(
            error="Missing required fields: extractedText and question",
            hint="Send the extractedText returned by /upload along with the user question",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(exclude_none=True),
        )

    try:
        answer = await service.answer(payload.extracted_text, payload.question)
    except Exception as exc:
        logger.exception("Q&A processing error")
        body = ErrorResponse(error="Q&A processing failed", details=str(exc) or "Unknown error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(exclude_none=True),
        )

    return AskResponse(question=payload.question, answer=answer)
