"""
Document Processing Package
════════════════════════════

The ingestion core: everything between "bytes arrived" and "text ready to
summarize".

Modules
───────
  document.py   Format validator — extension, empty-payload and PDF signature checks
  strategy.py   Pure strategy selector (direct decode / inline OCR / referenced OCR)
  ocr.py        Text-detection collaborator interface + AWS Textract backend
  extractor.py  Orchestrator — runs the strategy, joins LINE blocks, classifies failures
"""

from pdfgenie.processing.document import Document, Extension, validate
from pdfgenie.processing.extractor import ErrorRule, ExtractionOrchestrator, ExtractionResult
from pdfgenie.processing.ocr import BaseTextDetector, TextBlock, TextractDetector
from pdfgenie.processing.strategy import ExtractionStrategy, StoredReference, select_strategy

__all__ = [
    "Document",
    "Extension",
    "validate",
    "ErrorRule",
    "ExtractionOrchestrator",
    "ExtractionResult",
    "BaseTextDetector",
    "TextBlock",
    "TextractDetector",
    "ExtractionStrategy",
    "StoredReference",
    "select_strategy",
]
