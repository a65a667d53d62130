"""S3-compatible storage client implementation.

This module provides an S3-compatible storage client that works with
AWS S3, MinIO, and other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from bucket_gateway.infra.observability.metrics import STORAGE_OPERATIONS
from bucket_gateway.infra.storage.client import (
    CompletedPart,
    MultipartUpload,
    ObjectEntry,
    ObjectHead,
    StorageError,
    UploadId,
)

if TYPE_CHECKING:
    from bucket_gateway.common.config import Settings


class S3StorageClient:
    """S3-compatible object storage client.

    Supports AWS S3, MinIO, and other S3-compatible services.
    Uses boto3 for all storage operations. The underlying boto3 client is
    thread-safe, so one instance is shared by every request.
    """

    def __init__(self, *, settings: "Settings") -> None:
        """Initialize the S3 client with configuration from settings.

        Args:
            settings: Application settings containing S3 configuration.

        Raises:
            StorageError: If boto3 is not installed.
        """
        self._settings = settings
        self._client = self._build_client(settings)

    @staticmethod
    def _build_client(settings: "Settings") -> Any:
        """Create a boto3 S3 client from settings."""
        try:
            import boto3
            from botocore.config import Config
        except ImportError as exc:
            raise StorageError(
                "boto3 and botocore are required for S3 storage backend. "
                "Install with: pip install boto3"
            ) from exc

        addressing_style = (settings.S3_ADDRESSING_STYLE or "path").strip().lower()
        config = Config(
            s3={"addressing_style": addressing_style},
            signature_version="s3v4",
        )

        return boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT or None,
            region_name=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            config=config,
        )

    def _invoke(self, operation: str, failure: str, **params: Any) -> Any:
        try:
            response = getattr(self._client, operation)(**params)
        except Exception as exc:
            STORAGE_OPERATIONS.labels(operation, "error").inc()
            raise StorageError(f"{failure}: {exc}") from exc
        STORAGE_OPERATIONS.labels(operation, "ok").inc()
        return response

    def init_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        content_type: str | None = None,
    ) -> MultipartUpload:
        """Initialize a multipart upload session."""
        params: dict[str, Any] = {"Bucket": bucket, "Key": object_key}
        if content_type:
            params["ContentType"] = content_type

        response = self._invoke(
            "create_multipart_upload", "Failed to create multipart upload", **params
        )

        upload_id = response.get("UploadId")
        if not upload_id:
            raise StorageError("S3 response missing UploadId")

        return MultipartUpload(
            upload_id=UploadId(str(upload_id)),
            bucket=bucket,
            object_key=str(response.get("Key") or object_key),
        )

    def presign_upload_part(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: UploadId,
        part_number: int,
        expires_in: int,
    ) -> str:
        """Generate a presigned URL for uploading a part."""
        url = self._invoke(
            "generate_presigned_url",
            "Failed to generate presigned URL",
            ClientMethod="upload_part",
            Params={
                "Bucket": bucket,
                "Key": object_key,
                "UploadId": upload_id,
                "PartNumber": int(part_number),
            },
            ExpiresIn=int(expires_in),
        )

        if not url:
            raise StorageError("Generated presigned URL is empty")

        return str(url)

    def complete_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: UploadId,
        parts: Sequence[CompletedPart],
    ) -> None:
        """Complete a multipart upload; parts are submitted in the order given."""
        multipart_payload = {
            "Parts": [
                {"ETag": part.etag, "PartNumber": int(part.part_number)}
                for part in parts
            ]
        }

        self._invoke(
            "complete_multipart_upload",
            "Failed to complete multipart upload",
            Bucket=bucket,
            Key=object_key,
            UploadId=upload_id,
            MultipartUpload=multipart_payload,
        )

    def abort_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: UploadId,
    ) -> None:
        """Abort a multipart upload and clean up uploaded parts."""
        self._invoke(
            "abort_multipart_upload",
            "Failed to abort multipart upload",
            Bucket=bucket,
            Key=object_key,
            UploadId=upload_id,
        )

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        """Get object metadata without downloading the content."""
        response = self._invoke(
            "head_object",
            "Failed to get object metadata",
            Bucket=bucket,
            Key=object_key,
        )

        size = response.get("ContentLength")
        return ObjectHead(
            size_bytes=int(size) if size is not None else 0,
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
        )

    def list_objects(
        self,
        *,
        bucket: str,
        prefix: str = "",
        delimiter: str = "",
    ) -> list[ObjectEntry]:
        """List content entries under a prefix, following every page."""
        params: dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        if delimiter:
            params["Delimiter"] = delimiter

        entries: list[ObjectEntry] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for item in page.get("Contents", []) or []:
                    entries.append(
                        ObjectEntry(
                            key=str(item["Key"]), size=int(item.get("Size") or 0)
                        )
                    )
        except Exception as exc:
            STORAGE_OPERATIONS.labels("list_objects_v2", "error").inc()
            raise StorageError(f"Failed to list objects: {exc}") from exc

        STORAGE_OPERATIONS.labels("list_objects_v2", "ok").inc()
        return entries

    def copy_object(
        self,
        *,
        bucket: str,
        source_key: str,
        target_key: str,
    ) -> None:
        """Server-side copy of an object inside the bucket."""
        self._invoke(
            "copy_object",
            "Failed to copy object",
            Bucket=bucket,
            CopySource={"Bucket": bucket, "Key": source_key},
            Key=target_key,
        )

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object from storage."""
        self._invoke(
            "delete_object",
            "Failed to delete object",
            Bucket=bucket,
            Key=object_key,
        )

    def presign_download(
        self,
        *,
        bucket: str,
        object_key: str,
        expires_in: int,
        filename: str | None = None,
    ) -> str:
        """Generate a presigned URL for downloading an object."""
        disposition = "attachment"
        if filename:
            # Escape quotes in filename for Content-Disposition header
            safe_filename = filename.replace('"', '\\"')
            disposition = f'attachment; filename="{safe_filename}"'

        url = self._invoke(
            "generate_presigned_url",
            "Failed to generate download URL",
            ClientMethod="get_object",
            Params={
                "Bucket": bucket,
                "Key": object_key,
                "ResponseContentDisposition": disposition,
            },
            ExpiresIn=int(expires_in),
        )

        if not url:
            raise StorageError("Generated presigned URL is empty")

        return str(url)

    def check_bucket(self, *, bucket: str) -> None:
        """Verify the bucket is reachable."""
        self._invoke("head_bucket", "Bucket is not reachable", Bucket=bucket)
