"""
Format Validator
════════════════

Turns an inbound (file name, raw bytes) pair into a validated Document, or
raises a ClassifiedFailure before any external call is made.

Checks, in order:
  1. Extension derived from the trailing suffix must be supported  → UNSUPPORTED
  2. Payload must not be empty                                      → INVALID_FORMAT
  3. PDF only: first 5 bytes must be the "%PDF-" signature          → INVALID_FORMAT
  4. PDF only: "%%EOF" trailer in the last 1 KiB (warning, non-fatal)

Some PDF producers omit the trailer while the file stays fully readable, so
step 4 only logs.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from enum import Enum

from pdfgenie.core.errors import ClassifiedFailure, FailureKind

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"
PDF_TRAILER = b"%%EOF"
PDF_TRAILER_WINDOW = 1024


class Extension(str, Enum):
    PDF  = "pdf"
    TXT  = "txt"
    JPG  = "jpg"
    JPEG = "jpeg"
    PNG  = "png"
    TIF  = "tif"
    TIFF = "tiff"

    @property
    def is_image(self) -> bool:
        return self in _IMAGE_EXTENSIONS


_IMAGE_EXTENSIONS = frozenset(
    {Extension.JPG, Extension.JPEG, Extension.PNG, Extension.TIF, Extension.TIFF}
)

_CONTENT_TYPES: dict[Extension, str] = {
    Extension.PDF:  "application/pdf",
    Extension.TXT:  "text/plain",
    Extension.JPG:  "image/jpeg",
    Extension.JPEG: "image/jpeg",
    Extension.PNG:  "image/png",
    Extension.TIF:  "image/tiff",
    Extension.TIFF: "image/tiff",
}


@dataclass(frozen=True)
class Document:
    """Validated in-memory representation of an uploaded file."""
    name:      str
    extension: Extension
    data:      bytes = field(repr=False)

    @property
    def byte_length(self) -> int:
        return len(self.data)

    @property
    def content_type(self) -> str:
        return content_type_for(self.extension)


def content_type_for(extension: Extension) -> str:
    return _CONTENT_TYPES[extension]


def derive_extension(name: str) -> Extension | None:
    """Lower-cased trailing suffix of `name`, or None if absent or unsupported."""
    _, dot, suffix = name.rpartition(".")
    if not dot or not suffix:
        return None
    try:
        return Extension(suffix.lower())
    except ValueError:
        return None


def decode_payload(file_base64: str) -> bytes:
    """Decode the transport-safe base64 body into raw bytes."""
    try:
        return base64.b64decode(file_base64)
    except (binascii.Error, ValueError) as exc:
        raise ClassifiedFailure(
            FailureKind.INVALID_FORMAT,
            "Invalid file encoding: fileBase64 is not valid base64 data.",
            cause_detail=str(exc),
        ) from exc


def validate(name: str, raw_bytes: bytes) -> Document:
    """
    Validate a raw upload and build an immutable Document.

    Raises:
        ClassifiedFailure: UNSUPPORTED or INVALID_FORMAT.
    """
    extension = derive_extension(name)
    if extension is None:
        raise ClassifiedFailure(
            FailureKind.UNSUPPORTED,
            f"Unsupported file type: '{name}' is not supported. "
            f"Allowed: {', '.join(e.value for e in Extension)}.",
        )

    if not raw_bytes:
        raise ClassifiedFailure(
            FailureKind.INVALID_FORMAT,
            "Empty or invalid file received",
        )

    if extension is Extension.PDF:
        _check_pdf_structure(name, raw_bytes)

    return Document(name=name, extension=extension, data=bytes(raw_bytes))


def _check_pdf_structure(name: str, raw_bytes: bytes) -> None:
    if raw_bytes[:len(PDF_SIGNATURE)] != PDF_SIGNATURE:
        raise ClassifiedFailure(
            FailureKind.INVALID_FORMAT,
            "Invalid PDF file: File does not have a valid PDF signature. "
            "Please ensure the file is a valid PDF.",
        )

    if PDF_TRAILER not in raw_bytes[-PDF_TRAILER_WINDOW:]:
        logger.warning(
            "PDF might be truncated or corrupted: missing %%%%EOF marker | file=%s size=%d",
            name, len(raw_bytes),
        )
