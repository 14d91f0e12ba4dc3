"""
Composed FastAPI Dependencies

Single wiring point for the AWS collaborators. Route handlers depend on the
service objects built here; tests swap any layer via
`app.dependency_overrides`.
"""

from __future__ import annotations

import secrets
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from pdfgenie.core.config import settings
from pdfgenie.llm.bedrock import BaseTextGenerator, BedrockTextGenerator
from pdfgenie.processing.extractor import ExtractionOrchestrator
from pdfgenie.processing.ocr import BaseTextDetector, TextractDetector
from pdfgenie.schemas.documents import ErrorResponse
from pdfgenie.services.ingestion import IngestionService
from pdfgenie.services.qa import QuestionAnsweringService
from pdfgenie.storage.s3 import S3StorageService


# ---------------------------------------------------------------------------
# 1. API key gate
#    Keys are issued out of band; an empty API_KEYS setting disables the check.
# ---------------------------------------------------------------------------

_api_key_header = APIKeyHeader(name="X-Api-Key", auto_error=False)


async def require_api_key(
    api_key: Annotated[str | None, Security(_api_key_header)],
) -> None:
    allowed = settings.api_key_list
    if not allowed:
        return
    if api_key is None or not any(secrets.compare_digest(api_key, k) for k in allowed):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=ErrorResponse(error="Forbidden").model_dump(exclude_none=True),
        )


# ---------------------------------------------------------------------------
# 2. AWS collaborators: one instance per process, clients opened per call
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_storage() -> S3StorageService:
    return S3StorageService()


@lru_cache(maxsize=1)
def get_detector() -> BaseTextDetector:
    return TextractDetector()


@lru_cache(maxsize=1)
def get_generator() -> BaseTextGenerator:
    return BedrockTextGenerator()


def get_orchestrator(
    detector: Annotated[BaseTextDetector, Depends(get_detector)],
) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(detector)


# ---------------------------------------------------------------------------
# 3. Request-scoped services
# ---------------------------------------------------------------------------

def get_ingestion_service(
    storage:      Annotated[S3StorageService, Depends(get_storage)],
    orchestrator: Annotated[ExtractionOrchestrator, Depends(get_orchestrator)],
    generator:    Annotated[BaseTextGenerator, Depends(get_generator)],
) -> IngestionService:
    return IngestionService(storage=storage, orchestrator=orchestrator, generator=generator)


def get_qa_service(
    generator: Annotated[BaseTextGenerator, Depends(get_generator)],
) -> QuestionAnsweringService:
    return QuestionAnsweringService(generator)


# ---------------------------------------------------------------------------
# Type aliases for cleaner route signatures
# ---------------------------------------------------------------------------

Ingestion = Annotated[IngestionService, Depends(get_ingestion_service)]
QA        = Annotated[QuestionAnsweringService, Depends(get_qa_service)]
