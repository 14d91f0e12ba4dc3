"""
Extraction Orchestrator
═══════════════════════

Given a validated Document (and optionally a StoredReference), picks the
extraction strategy, runs it once, normalizes the OCR output and classifies
every failure.

  ┌──────────────────────────────────────────────────────────────────┐
  │  txt  ──► UTF-8 decode ──► done (never calls OCR)                │
  │                                                                  │
  │  pdf + ref  ──► REFERENCED_OCR ─┐                                │
  │  pdf        ──► size guard ─────┤                                │
  │                 (10 MiB)        ├─► detect_text ─► LINE blocks   │
  │  image      ──► INLINE_OCR ─────┘        │          joined " "   │
  │                                          │              │        │
  │                                          ▼              ▼        │
  │                              classify(exc)      blank? → NO_TEXT │
  └──────────────────────────────────────────────────────────────────┘

There is no retry transition: one attempt per request, then Extracted or
Failed(kind).

Service error codes are classified through an injected table of ErrorRule,
so supporting a new collaborator error is a one-line addition to that table.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Mapping

from pdfgenie.core.config import settings
from pdfgenie.core.errors import ClassifiedFailure, ExtractionServiceError, FailureKind
from pdfgenie.processing.document import Document, Extension
from pdfgenie.processing.ocr import BaseTextDetector, TextBlock
from pdfgenie.processing.strategy import (
    ExtractionStrategy,
    StoredReference,
    select_strategy,
)

logger = logging.getLogger(__name__)

LINE_BLOCK = "LINE"


# ---------------------------------------------------------------------------
# Result + classification table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractionResult:
    text:            str
    source_strategy: ExtractionStrategy


@dataclass(frozen=True)
class ErrorRule:
    """How a named service error maps onto the failure taxonomy."""
    kind:    FailureKind
    message: str


DEFAULT_ERROR_RULES: dict[str, ErrorRule] = {
    "UnsupportedDocumentException": ErrorRule(
        kind=FailureKind.EXTRACTION_SERVICE_REJECTED,
        message=(
            "PDF format not supported by Textract. Please ensure the PDF is not "
            "encrypted, password-protected, or corrupted. Try re-saving the PDF "
            "or using a different file."
        ),
    ),
    "InvalidParameterException": ErrorRule(
        kind=FailureKind.EXTRACTION_SERVICE_REJECTED,
        message="Invalid document format. The file might be corrupted or not a valid PDF.",
    ),
}


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class ExtractionOrchestrator:
    """
    Stateless per call — safe to share across concurrent requests.

    Constructor args:
        detector          : text-extraction collaborator (Textract in production)
        error_rules       : service error code → ErrorRule
        inline_max_bytes  : ceiling for inline PDF submission
    """

    def __init__(
        self,
        detector:         BaseTextDetector,
        error_rules:      Mapping[str, ErrorRule] | None = None,
        inline_max_bytes: int | None = None,
    ) -> None:
        self._detector         = detector
        self._error_rules      = dict(DEFAULT_ERROR_RULES if error_rules is None else error_rules)
        self._inline_max_bytes = (
            settings.textract_inline_max_bytes if inline_max_bytes is None else inline_max_bytes
        )

    async def extract(
        self,
        doc:        Document,
        stored_ref: StoredReference | None = None,
    ) -> ExtractionResult:
        """
        Extract text from `doc`.

        Raises:
            ClassifiedFailure: for every failure mode, already classified.
        """
        strategy = select_strategy(doc.extension, stored_ref is not None)

        if strategy is ExtractionStrategy.DIRECT_DECODE:
            # May legitimately be "", the caller decides what empty means
            return ExtractionResult(
                text=doc.data.decode("utf-8", errors="replace"),
                source_strategy=strategy,
            )

        logger.info(
            "Extraction start | file=%s ext=%s size=%d strategy=%s",
            doc.name, doc.extension.value, doc.byte_length, strategy.value,
        )
        t0 = time.monotonic()

        try:
            blocks = await self._run(doc, strategy, stored_ref)
            text = join_line_blocks(blocks)
            if not text.strip():
                raise ClassifiedFailure(
                    FailureKind.NO_EXTRACTABLE_TEXT,
                    "No text could be extracted from the document. The document "
                    "might be empty, image-based, or password-protected.",
                )
        except Exception as exc:
            failure = self.classify(exc)
            logger.warning(
                "Extraction failed | file=%s strategy=%s kind=%s detail=%s",
                doc.name, strategy.value, failure.kind.value, failure.cause_detail,
            )
            if failure is exc:
                raise
            raise failure from exc

        logger.info(
            "Extraction ok | file=%s strategy=%s chars=%d elapsed_ms=%.0f",
            doc.name, strategy.value, len(text), (time.monotonic() - t0) * 1000,
        )
        return ExtractionResult(text=text, source_strategy=strategy)

    async def _run(
        self,
        doc:        Document,
        strategy:   ExtractionStrategy,
        stored_ref: StoredReference | None,
    ) -> list[TextBlock]:
        if strategy is ExtractionStrategy.REFERENCED_OCR:
            return await self._detector.detect_text(reference=stored_ref)

        if doc.extension is Extension.PDF and doc.byte_length > self._inline_max_bytes:
            size_mb = doc.byte_length / 1024 / 1024
            max_mb = self._inline_max_bytes / 1024 / 1024
            raise ClassifiedFailure(
                FailureKind.TOO_LARGE,
                f"PDF file too large ({size_mb:.2f}MB, {doc.byte_length} bytes). "
                f"Maximum size is {max_mb:g}MB for direct processing.",
            )

        return await self._detector.detect_text(document_bytes=doc.data)

    def classify(self, exc: BaseException) -> ClassifiedFailure:
        """Map any exception raised while extracting onto the failure taxonomy."""
        if isinstance(exc, ClassifiedFailure):
            return exc

        if isinstance(exc, ExtractionServiceError):
            rule = self._error_rules.get(exc.code)
            if rule is not None:
                return ClassifiedFailure(rule.kind, rule.message, cause_detail=exc.message or exc.code)
            detail = exc.message or exc.code
            return ClassifiedFailure(
                FailureKind.EXTRACTION_SERVICE_TRANSIENT,
                f"Text extraction failed: {detail}",
                cause_detail=detail,
            )

        detail = str(exc) or None
        return ClassifiedFailure(
            FailureKind.UNKNOWN,
            f"Text extraction failed: {detail or 'Unknown error'}",
            cause_detail=detail,
        )


def join_line_blocks(blocks: list[TextBlock]) -> str:
    """Concatenate LINE-level blocks with single spaces, preserving service order."""
    return " ".join(b.text for b in blocks if b.block_type == LINE_BLOCK and b.text)
