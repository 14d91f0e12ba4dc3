"""
Integration Tests — POST /upload, POST /process, GET /health
═════════════════════════════════════════════════════════════
These tests exercise the FULL FastAPI routing stack, including:
  - JSON body parsing with camelCase aliases
  - Dependency injection chain (S3 / Textract / Bedrock overridden)
  - The {"error", "details"} envelope and kind → status mapping
  - The optional X-Api-Key gate

What is mocked vs real
──────────────────────
  ✅ Real: FastAPI routing, Pydantic schemas, exception handlers, format
           validation, ExtractionOrchestrator, IngestionService, prompts
  🔲 Mock: S3 storage   (mock_storage fixture)
  🔲 Mock: Textract     (mock_detector fixture)
  🔲 Mock: Bedrock      (mock_generator fixture)

How to run
──────────
  pytest -m integration tests/integration/test_api.py -v
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest

from pdfgenie.core.config import settings
from pdfgenie.core.errors import ExtractionServiceError, GenerationError


def _upload_body(name: str, encoded: str) -> dict:
    return {"fileName": name, "fileBase64": encoded}


# ─────────────────────────────────────────────────────────────────────────────
# POST /upload: success
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.integration
class TestUploadSuccess:

    async def test_txt_upload_returns_text_and_summary(
        self, async_client, b64, sample_txt_bytes, mock_detector
    ):
        resp = await async_client.post("/upload", json=_upload_body("notes.txt", b64(sample_txt_bytes)))

        assert resp.status_code == 200
        body = resp.json()
        assert set(body) == {
            "documentId", "fileName", "s3Key", "extractedText", "summary", "message",
        }
        assert body["extractedText"] == "Hello world!"
        assert body["summary"] == "A short summary."
        assert body["fileName"] == "notes.txt"
        assert body["s3Key"] == f"{body['documentId']}-notes.txt"
        uuid.UUID(body["documentId"])
        mock_detector.detect_text.assert_not_called()

    async def test_scanned_invoice(self, async_client, b64, sample_png_bytes, mock_detector, make_blocks):
        mock_detector.detect_text = AsyncMock(return_value=make_blocks(
            ("LINE", "Invoice"), ("WORD", "123"), ("LINE", "Total: 42"),
        ))

        resp = await async_client.post("/upload", json=_upload_body("scan.png", b64(sample_png_bytes)))

        assert resp.status_code == 200
        assert resp.json()["extractedText"] == "Invoice Total: 42"
        mock_detector.detect_text.assert_awaited_once_with(document_bytes=sample_png_bytes)

    async def test_pdf_is_read_from_storage(self, async_client, b64, sample_pdf_bytes, mock_detector):
        resp = await async_client.post("/upload", json=_upload_body("report.pdf", b64(sample_pdf_bytes)))

        assert resp.status_code == 200
        reference = mock_detector.detect_text.await_args.kwargs["reference"]
        assert reference.container_id == "test-bucket"
        assert reference.object_key == resp.json()["s3Key"]

    async def test_snake_case_body_is_accepted(self, async_client, b64):
        resp = await async_client.post(
            "/upload", json={"file_name": "notes.txt", "file_base64": b64(b"hi")},
        )
        assert resp.status_code == 200

    async def test_request_id_is_echoed(self, async_client, b64):
        resp = await async_client.post(
            "/upload",
            json=_upload_body("notes.txt", b64(b"hi")),
            headers={"X-Request-ID": "req-123"},
        )
        assert resp.headers["X-Request-ID"] == "req-123"


# ─────────────────────────────────────────────────────────────────────────────
# POST /upload: failures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.integration
class TestUploadFailures:

    async def test_empty_pdf_is_400(self, async_client, mock_storage):
        resp = await async_client.post("/upload", json=_upload_body("doc.pdf", ""))

        assert resp.status_code == 400
        assert resp.json()["error"] == "Empty or invalid file received"
        mock_storage.put_object.assert_not_called()

    async def test_unsupported_type_is_400(self, async_client, b64):
        resp = await async_client.post("/upload", json=_upload_body("slides.docx", b64(b"PK\x03\x04")))

        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Unsupported file type")

    async def test_bad_pdf_signature_is_400(self, async_client, b64):
        resp = await async_client.post("/upload", json=_upload_body("fake.pdf", b64(b"hello")))

        assert resp.status_code == 400
        assert "signature" in resp.json()["error"]

    async def test_encrypted_pdf_is_400_with_guidance(
        self, async_client, b64, sample_pdf_bytes, mock_detector, mock_generator
    ):
        mock_detector.detect_text = AsyncMock(side_effect=ExtractionServiceError(
            "UnsupportedDocumentException", "Request has unsupported document format",
        ))

        resp = await async_client.post("/upload", json=_upload_body("locked.pdf", b64(sample_pdf_bytes)))

        assert resp.status_code == 400
        body = resp.json()
        assert "encrypted" in body["error"]
        assert body["details"] == "Request has unsupported document format"
        mock_generator.generate.assert_not_called()

    async def test_blank_scan_is_400(self, async_client, b64, sample_png_bytes, mock_detector):
        mock_detector.detect_text = AsyncMock(return_value=[])

        resp = await async_client.post("/upload", json=_upload_body("blank.png", b64(sample_png_bytes)))

        assert resp.status_code == 400
        assert "No text could be extracted" in resp.json()["error"]

    async def test_transient_service_error_is_500(self, async_client, b64, sample_png_bytes, mock_detector):
        mock_detector.detect_text = AsyncMock(side_effect=ExtractionServiceError(
            "ThrottlingException", "Rate exceeded",
        ))

        resp = await async_client.post("/upload", json=_upload_body("scan.png", b64(sample_png_bytes)))

        assert resp.status_code == 500
        assert resp.json() == {"error": "Server processing error", "details": "Rate exceeded"}

    async def test_summary_failure_is_500(self, async_client, b64, mock_generator):
        mock_generator.generate = AsyncMock(side_effect=GenerationError("AI processing failed: boom"))

        resp = await async_client.post("/upload", json=_upload_body("notes.txt", b64(b"hi")))

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Server processing error",
            "details": "AI processing failed: boom",
        }

    async def test_storage_failure_is_500(self, async_client, b64, mock_storage):
        mock_storage.put_object = AsyncMock(side_effect=ConnectionError("s3 unreachable"))

        resp = await async_client.post("/upload", json=_upload_body("notes.txt", b64(b"hi")))

        assert resp.status_code == 500
        assert resp.json()["error"] == "Server processing error"

    async def test_missing_body_is_400(self, async_client):
        resp = await async_client.post("/upload")

        assert resp.status_code == 400
        assert resp.json()["error"] == "No input provided or request body is invalid"

    async def test_malformed_json_is_400(self, async_client):
        resp = await async_client.post(
            "/upload", content=b"{not json", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400


# ─────────────────────────────────────────────────────────────────────────────
# POST /process
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.integration
class TestProcess:

    async def test_answers_question(self, async_client, mock_generator):
        mock_generator.generate = AsyncMock(return_value="42")

        resp = await async_client.post(
            "/process", json={"extractedText": "The total is 42.", "question": "What is the total?"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"question": "What is the total?", "answer": "42"}
        prompt = mock_generator.generate.await_args.args[0]
        assert "The total is 42." in prompt
        assert "What is the total?" in prompt

    @pytest.mark.parametrize(
        "body",
        [
            {"extractedText": "", "question": "Why?"},
            {"extractedText": "Some text", "question": ""},
            {"question": "Why?"},
            {},
        ],
    )
    async def test_missing_fields_is_400(self, async_client, mock_generator, body):
        resp = await async_client.post("/process", json=body)

        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing required fields: extractedText and question"
        assert "hint" in resp.json()
        mock_generator.generate.assert_not_called()

    async def test_generation_failure_is_500(self, async_client, mock_generator):
        mock_generator.generate = AsyncMock(side_effect=GenerationError("AI processing failed: throttled"))

        resp = await async_client.post(
            "/process", json={"extractedText": "text", "question": "q?"},
        )

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Q&A processing failed",
            "details": "AI processing failed: throttled",
        }


# ─────────────────────────────────────────────────────────────────────────────
# API key gate
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.integration
class TestApiKey:

    @pytest.fixture(autouse=True)
    def _configure_keys(self, monkeypatch):
        monkeypatch.setattr(settings, "api_keys", "key-one, key-two")

    async def test_missing_key_is_403(self, async_client, b64, mock_storage):
        resp = await async_client.post("/upload", json=_upload_body("notes.txt", b64(b"hi")))

        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}
        mock_storage.put_object.assert_not_called()

    async def test_wrong_key_is_403(self, async_client):
        resp = await async_client.post(
            "/process",
            json={"extractedText": "t", "question": "q"},
            headers={"X-Api-Key": "nope"},
        )
        assert resp.status_code == 403

    @pytest.mark.parametrize("key", ["key-one", "key-two"])
    async def test_configured_key_is_allowed(self, async_client, b64, key):
        resp = await async_client.post(
            "/upload",
            json=_upload_body("notes.txt", b64(b"hi")),
            headers={"X-Api-Key": key},
        )
        assert resp.status_code == 200

    async def test_health_is_not_gated(self, async_client):
        resp = await async_client.get("/health")
        assert resp.status_code == 200


@pytest.mark.integration
async def test_health(async_client):
    resp = await async_client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "pdf-genie-api"}


@pytest.mark.integration
async def test_cors_preflight(async_client):
    resp = await async_client.options(
        "/upload",
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type, X-Api-Key",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] in ("*", "https://app.example.com")
