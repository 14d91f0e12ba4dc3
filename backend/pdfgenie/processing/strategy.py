"""
Extraction strategy selection — pure, no I/O.

  extension      stored copy?   strategy
  ─────────────  ────────────   ──────────────
  txt            any            DIRECT_DECODE
  pdf            yes            REFERENCED_OCR
  pdf            no             INLINE_OCR
  image (any)    any            INLINE_OCR

OCR-by-reference sidesteps the inline payload ceiling, so it wins whenever a
persisted PDF is available.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pdfgenie.processing.document import Extension


class ExtractionStrategy(str, Enum):
    DIRECT_DECODE  = "direct_decode"
    INLINE_OCR     = "inline_ocr"
    REFERENCED_OCR = "referenced_ocr"


@dataclass(frozen=True)
class StoredReference:
    """Pointer to a persisted copy of a Document in object storage."""
    container_id: str   # S3 bucket
    object_key:   str


def select_strategy(extension: Extension, has_reference: bool) -> ExtractionStrategy:
    if extension is Extension.TXT:
        return ExtractionStrategy.DIRECT_DECODE
    if extension is Extension.PDF and has_reference:
        return ExtractionStrategy.REFERENCED_OCR
    return ExtractionStrategy.INLINE_OCR
