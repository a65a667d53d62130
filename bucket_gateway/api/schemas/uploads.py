"""Pydantic schemas for the multipart upload endpoints.

Field names on the wire are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from bucket_gateway.services.upload_service import MAX_PART_NUMBER


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MultipartUploadInit(_CamelModel):
    """Request body for initiating a multipart upload."""

    file_name: str = Field(alias="fileName", min_length=1)
    content_type: str | None = Field(default=None, alias="contentType")


class MultipartUploadOut(_CamelModel):
    """Upload session handle returned to the client."""

    id: str
    key: str


class PresignedUrlsRequest(_CamelModel):
    """Request body for minting per-part upload URLs."""

    file_key: str = Field(alias="fileKey", min_length=1)
    file_id: str = Field(alias="fileId", min_length=1)
    parts: int = Field(ge=1, le=MAX_PART_NUMBER)


class SignedPartUrl(_CamelModel):
    """Presigned URL for a single upload part."""

    signed_url: str = Field(alias="signedUrl")
    part_number: int = Field(alias="partNumber")


class UploadedPart(_CamelModel):
    """A part the client uploaded, as reported back for completion."""

    e_tag: str = Field(alias="eTag", min_length=1)
    part_number: int = Field(alias="partNumber", ge=1, le=MAX_PART_NUMBER)


class MultipartUploadComplete(_CamelModel):
    """Request body for completing a multipart upload."""

    file_key: str = Field(alias="fileKey", min_length=1)
    file_id: str = Field(alias="fileId", min_length=1)
    parts: list[UploadedPart] = Field(min_length=1)


class MultipartUploadAbort(_CamelModel):
    """Request body for abandoning a multipart upload."""

    file_key: str = Field(alias="fileKey", min_length=1)
    file_id: str = Field(alias="fileId", min_length=1)


class CompletedUploadOut(_CamelModel):
    """Final object key and size after completion."""

    key: str
    size: int
