"""
Pydantic Request/Response Schemas

Wire format is camelCase JSON (the browser client stores `extractedText`
locally and sends it back for Q&A); Python attributes stay snake_case.

  POST /upload   UploadRequest  → UploadResponse   (200)
  POST /process  AskRequest     → AskResponse      (200)
  any 4xx/5xx                   → ErrorResponse
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

class UploadRequest(_CamelModel):
    file_name:   str = Field("", description="Original file name; its suffix selects the format")
    file_base64: str = Field("", description="File content, base64-encoded")


class UploadResponse(_CamelModel):
    document_id:    UUID = Field(..., description="Server-generated document UUID")
    file_name:      str
    s3_key:         str  = Field(..., description="Object key of the stored upload")
    extracted_text: str  = Field(..., description="Full extracted text; the client keeps it for Q&A")
    summary:        str
    message:        str  = "Document processed successfully. You can now ask questions about it."


# ---------------------------------------------------------------------------
# Q&A
# ---------------------------------------------------------------------------

class AskRequest(_CamelModel):
    extracted_text: str = Field("", description="Text returned by a previous /upload call")
    question:       str = ""


class AskResponse(_CamelModel):
    question: str
    answer:   str


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    """
    Uniform error envelope.
    `error` is safe to show to users; `details` carries the raw upstream
    message for diagnostics.
    """
    error:   str
    details: str | None = None
    hint:    str | None = None
