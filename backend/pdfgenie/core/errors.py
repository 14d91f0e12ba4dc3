"""
Failure taxonomy for the ingestion pipeline.

Every failure is classified once, at the point where it is detected, and
carried untouched to the HTTP boundary. The status code is a direct function
of the failure kind; the human-readable message never drives control flow.

  kind                           HTTP   caller can fix it?
  ─────────────────────────────  ────   ──────────────────
  INVALID_FORMAT                 400    yes — bad signature / empty payload
  UNSUPPORTED                    400    yes — extension not accepted
  TOO_LARGE                      400    yes — inline ceiling exceeded
  NO_EXTRACTABLE_TEXT            400    yes — blank, image-only, protected
  EXTRACTION_SERVICE_REJECTED    400    yes — encrypted / corrupted file
  EXTRACTION_SERVICE_TRANSIENT   500    no
  UNKNOWN                        500    no
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    INVALID_FORMAT               = "invalid_format"
    UNSUPPORTED                  = "unsupported"
    TOO_LARGE                    = "too_large"
    NO_EXTRACTABLE_TEXT          = "no_extractable_text"
    EXTRACTION_SERVICE_REJECTED  = "extraction_service_rejected"
    EXTRACTION_SERVICE_TRANSIENT = "extraction_service_transient"
    UNKNOWN                      = "unknown"


HTTP_STATUS_BY_KIND: dict[FailureKind, int] = {
    FailureKind.INVALID_FORMAT:               400,
    FailureKind.UNSUPPORTED:                  400,
    FailureKind.TOO_LARGE:                    400,
    FailureKind.NO_EXTRACTABLE_TEXT:          400,
    FailureKind.EXTRACTION_SERVICE_REJECTED:  400,
    FailureKind.EXTRACTION_SERVICE_TRANSIENT: 500,
    FailureKind.UNKNOWN:                      500,
}


class ClassifiedFailure(Exception):
    """
    A stable, enumerated failure outcome.

    kind         : position in the taxonomy above
    message      : user-facing, actionable text (no upstream stack traces)
    cause_detail : raw upstream message, for diagnostics only
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        cause_detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause_detail = cause_detail

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"ClassifiedFailure(kind={self.kind.value!r}, message={self.message!r})"


class ExtractionServiceError(Exception):
    """Named error reported by the text-extraction service (e.g. Textract)."""

    def __init__(self, code: str, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message
        self.status_code = status_code


class GenerationError(RuntimeError):
    """Raised when the text-generation backend fails or returns unusable output."""
