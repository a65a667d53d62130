"""Multipart upload orchestration.

The upload runs in three client-coordinated phases: initiate, issue one
presigned URL per part, then complete with the parts the client reports.
The service keeps no session state between requests; the upload id is
owned by the storage backend and passed through unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from bucket_gateway.infra.storage.client import (
    CompletedPart,
    MultipartUpload,
    StorageError,
    UploadId,
)
from bucket_gateway.services.base import BaseService, InvalidRequestError

# Maximum part number allowed by S3
MAX_PART_NUMBER = 10000

logger = logging.getLogger("storage")


@dataclass(frozen=True, slots=True)
class PartUrl:
    """Presigned URL for uploading a single part."""

    part_number: int
    url: str


@dataclass(frozen=True, slots=True)
class CompletedUpload:
    """Final object produced by a completed multipart upload."""

    key: str
    size: int


def order_parts(parts: Iterable[CompletedPart]) -> list[CompletedPart]:
    """Return parts ascending by part number, as the completion manifest needs."""
    return sorted(parts, key=lambda part: part.part_number)


class UploadService(BaseService):
    """Application service for the multipart upload protocol."""

    def initiate(
        self, object_key: str, *, content_type: str | None = None
    ) -> MultipartUpload:
        """Open a new multipart upload session for object_key.

        Raises:
            InvalidRequestError: If the key is empty.
            StorageError: If the backend refuses the session.
        """
        key = self._require_key(object_key, "fileName")
        upload = self._storage.init_multipart_upload(
            bucket=self.bucket,
            object_key=key,
            content_type=content_type,
        )
        logger.info(
            "multipart_upload_initiated key=%s upload_id=%s",
            upload.object_key,
            upload.upload_id,
            extra={
                "extra": {"key": upload.object_key, "upload_id": upload.upload_id}
            },
        )
        return upload

    def presign_parts(
        self,
        object_key: str,
        upload_id: UploadId,
        part_count: int,
    ) -> list[PartUrl]:
        """Mint one upload URL per part number 1..part_count.

        Each URL is scoped to a single (key, upload_id, part_number) tuple
        and expires after PART_URL_EXPIRES_SECONDS. Re-issuing a URL for the
        same part is harmless.

        Raises:
            InvalidRequestError: If the key or upload id is empty, or
                part_count is outside 1..MAX_PART_NUMBER.
            StorageError: If URL generation fails.
        """
        key = self._require_key(object_key, "fileKey")
        upload = self._require_key(upload_id, "fileId")
        if part_count < 1 or part_count > MAX_PART_NUMBER:
            raise InvalidRequestError(
                f"parts must be between 1 and {MAX_PART_NUMBER}"
            )

        expires_in = int(self._settings.PART_URL_EXPIRES_SECONDS)
        urls: list[PartUrl] = []
        for part_number in range(1, part_count + 1):
            url = self._storage.presign_upload_part(
                bucket=self.bucket,
                object_key=key,
                upload_id=UploadId(upload),
                part_number=part_number,
                expires_in=expires_in,
            )
            urls.append(PartUrl(part_number=part_number, url=url))
        return urls

    def complete(
        self,
        object_key: str,
        upload_id: UploadId,
        parts: Iterable[CompletedPart],
    ) -> CompletedUpload:
        """Assemble the uploaded parts into the final object.

        Parts are sorted by part number before submission; the order the
        client reported them in is not trusted. The object size comes from a
        follow-up HEAD request since the completion response does not carry
        it. A failed HEAD is reported as a failure even though the
        completion itself went through.

        Raises:
            InvalidRequestError: If the key or upload id is empty, or no
                parts were given.
            StorageError: If the backend rejects the manifest or the final
                object cannot be looked up.
        """
        key = self._require_key(object_key, "fileKey")
        upload = UploadId(self._require_key(upload_id, "fileId"))
        manifest = order_parts(parts)
        if not manifest:
            raise InvalidRequestError("parts list cannot be empty")

        self._storage.complete_multipart_upload(
            bucket=self.bucket,
            object_key=key,
            upload_id=upload,
            parts=manifest,
        )

        try:
            head = self._storage.head_object(bucket=self.bucket, object_key=key)
        except StorageError as exc:
            logger.error(
                "multipart_upload_head_failed key=%s upload_id=%s error=%s",
                key,
                upload,
                exc,
                extra={"extra": {"key": key, "upload_id": upload}},
            )
            raise StorageError(
                f"Upload was completed but the object could not be verified: {exc}"
            ) from exc

        logger.info(
            "multipart_upload_completed key=%s parts=%s size=%s",
            key,
            len(manifest),
            head.size_bytes,
            extra={
                "extra": {"key": key, "parts": len(manifest), "size": head.size_bytes}
            },
        )
        return CompletedUpload(key=key, size=int(head.size_bytes))

    def abort(self, object_key: str, upload_id: UploadId) -> None:
        """Abandon an upload session so the backend discards stored parts."""
        key = self._require_key(object_key, "fileKey")
        upload = UploadId(self._require_key(upload_id, "fileId"))
        self._storage.abort_multipart_upload(
            bucket=self.bucket,
            object_key=key,
            upload_id=upload,
        )
        logger.info(
            "multipart_upload_aborted key=%s upload_id=%s",
            key,
            upload,
            extra={"extra": {"key": key, "upload_id": upload}},
        )
