"""
Document Ingestion Service

Runs one upload end to end, strictly in sequence:
  1. Decode base64 payload
  2. Validate format (extension, empty payload, PDF signature)
  3. Store raw file in S3 under <document_id>-<file name>
  4. Extract text (Textract by S3 reference for PDFs, inline for images,
     direct UTF-8 decode for .txt)
  5. Summarize the (truncated) text with Bedrock
  6. Return extracted text + summary; the client keeps the text for Q&A

Persistence must finish before step 4 because OCR-by-reference reads the
stored object. Nothing is kept between requests.

Failure handling:
  - Validation and extraction failures are ClassifiedFailure and propagate
    untouched to the route.
  - Storage and generation failures propagate as-is; the route maps them to
    a 500.
"""

from __future__ import annotations

import logging
import time
import uuid

from pdfgenie.core.errors import ClassifiedFailure, FailureKind
from pdfgenie.llm.bedrock import BaseTextGenerator
from pdfgenie.llm.prompts import build_summary_prompt
from pdfgenie.processing.document import decode_payload, validate
from pdfgenie.processing.extractor import ExtractionOrchestrator
from pdfgenie.schemas.documents import UploadResponse
from pdfgenie.storage.s3 import S3StorageService, build_object_key

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Stateless service object.
    All collaborators are injected (testable, no hidden globals).
    """

    def __init__(
        self,
        storage:      S3StorageService,
        orchestrator: ExtractionOrchestrator,
        generator:    BaseTextGenerator,
    ) -> None:
        self._storage      = storage
        self._orchestrator = orchestrator
        self._generator    = generator

    async def ingest(self, file_name: str, file_base64: str) -> UploadResponse:
        """
        Full ingestion pipeline.

        Raises:
            ClassifiedFailure: caller-facing validation / extraction failures.
        """
        t0 = time.monotonic()

        # ---- Step 1-2: Decode + validate --------------------------------
        raw = decode_payload(file_base64)
        doc = validate(file_name, raw)

        # ---- Step 3: Store raw upload ----------------------------------
        document_id = uuid.uuid4()
        object_key  = build_object_key(document_id, file_name)

        logger.info(
            "Ingest start | doc=%s file=%s ext=%s size=%d",
            document_id, file_name, doc.extension.value, doc.byte_length,
        )

        stored_ref = await self._storage.put_object(
            object_key=object_key,
            body=doc.data,
            content_type=doc.content_type,
            metadata={"document_id": str(document_id)},
        )

        # ---- Step 4: Extract -------------------------------------------
        result = await self._orchestrator.extract(doc, stored_ref)
        if not result.text:
            raise ClassifiedFailure(
                FailureKind.NO_EXTRACTABLE_TEXT,
                "Could not extract text from document",
            )

        # ---- Step 5: Summarize -----------------------------------------
        logger.info("Generating summary | doc=%s chars=%d", document_id, len(result.text))
        summary = await self._generator.generate(build_summary_prompt(result.text))

        logger.info(
            "Ingest ok | doc=%s strategy=%s chars=%d elapsed_ms=%.0f",
            document_id, result.source_strategy.value, len(result.text),
            (time.monotonic() - t0) * 1000,
        )

        return UploadResponse(
            document_id=document_id,
            file_name=file_name,
            s3_key=stored_ref.object_key,
            extracted_text=result.text,
            summary=summary,
        )
