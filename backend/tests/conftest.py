"""
Root conftest.py — Shared fixtures for ALL tests (unit + integration)

Environment strategy:
  - No test touches real AWS: S3, Textract and Bedrock collaborators are
    replaced with MagicMock(spec=...) objects whose coroutines are AsyncMock.
  - API tests run the real FastAPI stack through httpx's ASGITransport with
    dependency_overrides for the collaborators.

How to run:
  pytest                          # all tests
  pytest -m unit                  # unit tests only (fast, no I/O)
  pytest -m integration           # full FastAPI stack, AWS mocked
"""

from __future__ import annotations

import base64
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient

# ─────────────────────────────────────────────────────────────────────────────
# Patch settings BEFORE any app imports so modules read test config
# ─────────────────────────────────────────────────────────────────────────────

os.environ.setdefault("AWS_REGION",            "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID",     "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("S3_BUCKET",             "test-bucket")
os.environ.setdefault("API_KEYS",              "")
os.environ.setdefault("APP_ENV",               "development")
os.environ.setdefault("DEBUG",                 "true")


# ─────────────────────────────────────────────────────────────────────────────
# Sample file bytes
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Minimal valid PDF — passes the %PDF- signature and %%EOF trailer checks."""
    return (
        b"%PDF-1.4\n"
        b"1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
        b"2 0 obj\n<< /Type /Pages /Kids [3 0 R] /Count 1 >>\nendobj\n"
        b"3 0 obj\n<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>\nendobj\n"
        b"xref\n0 4\n"
        b"0000000000 65535 f \n"
        b"0000000009 00000 n \n"
        b"0000000058 00000 n \n"
        b"0000000115 00000 n \n"
        b"trailer\n<< /Size 4 /Root 1 0 R >>\n"
        b"startxref\n195\n%%EOF"
    )


@pytest.fixture
def sample_png_bytes() -> bytes:
    """PNG signature followed by filler — the validator does not inspect image headers."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def sample_txt_bytes() -> bytes:
    return "Hello world!".encode("utf-8")


@pytest.fixture
def b64():
    """Encode bytes the way the browser client does."""
    def _encode(data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")
    return _encode


# ─────────────────────────────────────────────────────────────────────────────
# Textract block helpers
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def make_blocks():
    """
    Factory: build TextBlock lists from (block_type, text) tuples.

    Usage:
        make_blocks(("LINE", "Invoice"), ("WORD", "123"))
    """
    from pdfgenie.processing.ocr import TextBlock

    def _build(*pairs: tuple[str, str]) -> list[TextBlock]:
        return [TextBlock(block_type=t, text=x) for t, x in pairs]

    return _build


# ─────────────────────────────────────────────────────────────────────────────
# Mock collaborators
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_detector(make_blocks):
    """Mocked text detector — returns a single LINE block by default."""
    from pdfgenie.processing.ocr import BaseTextDetector

    detector = MagicMock(spec=BaseTextDetector)
    detector.detect_text = AsyncMock(return_value=make_blocks(("LINE", "Extracted line")))
    return detector


@pytest.fixture
def mock_storage():
    """Mocked S3StorageService — put_object echoes a StoredReference."""
    from pdfgenie.processing.strategy import StoredReference
    from pdfgenie.storage.s3 import S3StorageService

    storage = MagicMock(spec=S3StorageService)

    async def _put_object(object_key, body, content_type, metadata=None):
        return StoredReference(container_id="test-bucket", object_key=object_key)

    storage.put_object = AsyncMock(side_effect=_put_object)
    return storage


@pytest.fixture
def mock_generator():
    """Mocked text generator — fixed completion."""
    from pdfgenie.llm.bedrock import BaseTextGenerator

    generator = MagicMock(spec=BaseTextGenerator)
    generator.generate = AsyncMock(return_value="A short summary.")
    return generator


@pytest.fixture
def orchestrator(mock_detector):
    from pdfgenie.processing.extractor import ExtractionOrchestrator
    return ExtractionOrchestrator(mock_detector)


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI test client with dependency overrides
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def app_with_overrides(mock_storage, mock_detector, mock_generator):
    """
    FastAPI app with every AWS collaborator overridden:
      - get_storage   → mock_storage   (no S3)
      - get_detector  → mock_detector  (no Textract)
      - get_generator → mock_generator (no Bedrock)

    The real ExtractionOrchestrator and IngestionService run in between.
    """
    from pdfgenie.api.deps import get_detector, get_generator, get_storage
    from pdfgenie.main import app

    app.dependency_overrides[get_storage]   = lambda: mock_storage
    app.dependency_overrides[get_detector]  = lambda: mock_detector
    app.dependency_overrides[get_generator] = lambda: mock_generator

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app_with_overrides) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client using the overridden app."""
    from httpx import ASGITransport
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
