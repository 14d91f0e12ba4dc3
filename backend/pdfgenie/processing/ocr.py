"""
Text Detection Backends
═══════════════════════

The orchestrator talks to OCR through a single narrow interface:

    detect_text(document_bytes=...)  → inline submission
    detect_text(reference=...)       → OCR of an object already on S3

and gets back the service's typed blocks in their original order. Turning
blocks into text, and failures into the ClassifiedFailure taxonomy, is the
orchestrator's job (see extractor.py) — backends only translate their SDK's
exceptions into ExtractionServiceError so the orchestrator never imports
botocore.

AWS Textract (DetectDocumentText, synchronous API):
  - Bytes payloads are capped at 10 MiB upstream
  - S3Object payloads have no such ceiling; the caller's IAM role needs
    s3:GetObject on the bucket in addition to textract:DetectDocumentText
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from pdfgenie.core.config import settings
from pdfgenie.core.errors import ExtractionServiceError
from pdfgenie.processing.strategy import StoredReference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextBlock:
    """One unit of OCR output (LINE, WORD, PAGE, TABLE …)."""
    block_type: str
    text:       str = ""


class BaseTextDetector(ABC):
    """
    Abstract text-extraction collaborator.

    Implementations:
      - Accept exactly one of inline bytes or a StoredReference
      - Return blocks in service order, unfiltered
      - Raise ExtractionServiceError for any service-reported failure
    """

    @abstractmethod
    async def detect_text(
        self,
        *,
        document_bytes: bytes | None = None,
        reference:      StoredReference | None = None,
    ) -> list[TextBlock]:
        """Run OCR over the given document and return its blocks."""


class TextractDetector(BaseTextDetector):
    """AWS Textract DetectDocumentText over aioboto3."""

    def __init__(self, region: str | None = None) -> None:
        self._region  = region or settings.aws_region
        self._session = aioboto3.Session()

    def _client(self):
        return self._session.client("textract", region_name=self._region)

    async def detect_text(
        self,
        *,
        document_bytes: bytes | None = None,
        reference:      StoredReference | None = None,
    ) -> list[TextBlock]:
        if (document_bytes is None) == (reference is None):
            raise ValueError("Provide exactly one of document_bytes or reference")

        if reference is not None:
            document = {
                "S3Object": {"Bucket": reference.container_id, "Name": reference.object_key}
            }
            source = f"s3://{reference.container_id}/{reference.object_key}"
        else:
            document = {"Bytes": document_bytes}
            source = f"inline ({len(document_bytes)} bytes)"

        t0 = time.monotonic()
        try:
            async with self._client() as textract:
                response = await textract.detect_document_text(Document=document)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            status_code = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            logger.error(
                "Textract error | source=%s code=%s status=%s message=%s",
                source, error.get("Code"), status_code, error.get("Message"),
            )
            raise ExtractionServiceError(
                code=error.get("Code") or "ClientError",
                message=error.get("Message") or str(exc),
                status_code=status_code,
            ) from exc
        except BotoCoreError as exc:
            logger.error("Textract transport error | source=%s error=%s", source, exc)
            raise ExtractionServiceError(code=type(exc).__name__, message=str(exc)) from exc

        blocks = [
            TextBlock(block_type=b.get("BlockType", ""), text=b.get("Text") or "")
            for b in response.get("Blocks", [])
        ]
        logger.info(
            "Textract | source=%s blocks=%d elapsed_ms=%.0f",
            source, len(blocks), (time.monotonic() - t0) * 1000,
        )
        return blocks
