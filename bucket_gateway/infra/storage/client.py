"""Storage client protocol and data types.

This module defines the interface the services use to talk to the bucket:
multipart uploads, presigned URLs and basic object management.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType, Protocol, Sequence

# Minted and tracked by the backend; passed through unchanged.
UploadId = NewType("UploadId", str)


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""


@dataclass(frozen=True, slots=True)
class CompletedPart:
    """Represents a completed part in a multipart upload."""

    part_number: int
    etag: str


@dataclass(frozen=True, slots=True)
class MultipartUpload:
    """Result of initiating a multipart upload."""

    upload_id: UploadId
    bucket: str
    object_key: str


@dataclass(frozen=True, slots=True)
class ObjectHead:
    """Metadata from a HEAD object request."""

    size_bytes: int
    etag: str | None
    content_type: str | None


@dataclass(frozen=True, slots=True)
class ObjectEntry:
    """One entry of a bucket listing."""

    key: str
    size: int


class StorageClient(Protocol):
    """Protocol defining the interface for object storage backends.

    Every method raises StorageError when the backend call fails.
    """

    def init_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        content_type: str | None = None,
    ) -> MultipartUpload:
        """Initialize a multipart upload session.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            content_type: MIME type of the object.

        Returns:
            MultipartUpload containing the upload_id for subsequent operations.
        """
        ...

    def presign_upload_part(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: UploadId,
        part_number: int,
        expires_in: int,
    ) -> str:
        """Generate a presigned URL for uploading a part.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            upload_id: Multipart upload ID from init_multipart_upload.
            part_number: Part number (1-based, max 10000).
            expires_in: URL expiration time in seconds.

        Returns:
            Presigned URL for PUT request.
        """
        ...

    def complete_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: UploadId,
        parts: Sequence[CompletedPart],
    ) -> None:
        """Complete a multipart upload with the given parts, in the given order."""
        ...

    def abort_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: UploadId,
    ) -> None:
        """Abort a multipart upload and let the backend discard uploaded parts."""
        ...

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        """Get object metadata without downloading the content."""
        ...

    def list_objects(
        self,
        *,
        bucket: str,
        prefix: str = "",
        delimiter: str = "",
    ) -> list[ObjectEntry]:
        """List object entries under a prefix in backend order.

        Only flat content entries are returned; common prefixes produced by
        the delimiter are not.
        """
        ...

    def copy_object(
        self,
        *,
        bucket: str,
        source_key: str,
        target_key: str,
    ) -> None:
        """Server-side copy of an object inside the bucket."""
        ...

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object from storage."""
        ...

    def presign_download(
        self,
        *,
        bucket: str,
        object_key: str,
        expires_in: int,
        filename: str | None = None,
    ) -> str:
        """Generate a presigned GET URL with an attachment disposition.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            expires_in: URL expiration time in seconds.
            filename: Optional filename for the Content-Disposition header.

        Returns:
            Presigned URL for GET request.
        """
        ...

    def check_bucket(self, *, bucket: str) -> None:
        """Verify the bucket exists and is reachable with these credentials."""
        ...
