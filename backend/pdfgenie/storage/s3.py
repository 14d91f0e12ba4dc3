"""
S3 Storage Service

Persists the raw upload before extraction so Textract can OCR PDFs by
reference (S3Object) instead of inline bytes.

Object layout:
    s3://<BUCKET>/<document_id>-<sanitized file name>

The bucket is private, SSE-S3 encrypted, and expires objects after 1 day —
uploads are ephemeral, nothing here manages their lifecycle.
"""

from __future__ import annotations

import logging
import re
from uuid import UUID

import aioboto3

from pdfgenie.core.config import settings
from pdfgenie.processing.strategy import StoredReference

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[\\/\x00-\x1f]")


def build_object_key(document_id: UUID, filename: str) -> str:
    """
    Build the object key for an upload.
    Path separators and control characters in the client-supplied name are
    replaced so the key can never escape the bucket root.
    """
    safe_name = _UNSAFE_KEY_CHARS.sub("_", filename).replace("..", "_")
    return f"{document_id}-{safe_name}"


class S3StorageService:
    """
    Async S3 operations against a single bucket.

    Clients are opened per call (`async with`), so one instance can be shared
    by concurrent requests.
    """

    def __init__(self, bucket: str | None = None, region: str | None = None) -> None:
        self._bucket  = bucket or settings.s3_bucket
        self._region  = region or settings.aws_region
        self._session = aioboto3.Session()

    @property
    def bucket(self) -> str:
        return self._bucket

    def _client(self):
        """Return a scoped async S3 client context manager."""
        return self._session.client("s3", region_name=self._region)

    async def put_object(
        self,
        object_key:   str,
        body:         bytes,
        content_type: str,
        metadata:     dict[str, str] | None = None,
    ) -> StoredReference:
        """
        Upload `body` under `object_key`.

        Returns:
            StoredReference usable for OCR-by-reference.
        """
        extra: dict = {"ContentType": content_type}
        if metadata:
            extra["Metadata"] = metadata

        async with self._client() as s3:
            await s3.put_object(
                Bucket=self._bucket,
                Key=object_key,
                Body=body,
                **extra,
            )

        logger.info(
            "S3 upload ok | bucket=%s key=%s size=%d content_type=%s",
            self._bucket, object_key, len(body), content_type,
        )
        return StoredReference(container_id=self._bucket, object_key=object_key)
