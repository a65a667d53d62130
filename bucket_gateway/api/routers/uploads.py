"""Multipart upload API router.

Initiate, per-part URL issuance, completion and abort. The client uploads
part bytes directly to the presigned URLs; this service never sees them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from bucket_gateway.api.deps import get_services
from bucket_gateway.api.schemas.envelope import ApiResponse
from bucket_gateway.api.schemas.uploads import (
    CompletedUploadOut,
    MultipartUploadAbort,
    MultipartUploadComplete,
    MultipartUploadInit,
    MultipartUploadOut,
    PresignedUrlsRequest,
    SignedPartUrl,
)
from bucket_gateway.infra.storage.client import CompletedPart, UploadId
from bucket_gateway.services.base import InvalidRequestError
from bucket_gateway.services.bundle import ServiceBundle

router = APIRouter()


@router.post(
    "/initiate-multipart-upload",
    response_model=ApiResponse[MultipartUploadOut],
    summary="Initiate multipart upload",
    description="Open a multipart upload session for the given object key.",
)
def initiate_multipart_upload(
    payload: MultipartUploadInit,
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[MultipartUploadOut]:
    try:
        upload = services.upload().initiate(
            payload.file_name, content_type=payload.content_type
        )
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ApiResponse(
        payload=MultipartUploadOut(id=upload.upload_id, key=upload.object_key)
    )


@router.post(
    "/generate-presigned-urls",
    response_model=ApiResponse[list[SignedPartUrl]],
    summary="Generate presigned part URLs",
    description="Mint one time-limited upload URL per part, numbered from 1.",
)
def generate_presigned_urls(
    payload: PresignedUrlsRequest,
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[list[SignedPartUrl]]:
    try:
        urls = services.upload().presign_parts(
            payload.file_key, UploadId(payload.file_id), payload.parts
        )
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ApiResponse(
        payload=[
            SignedPartUrl(signed_url=u.url, part_number=u.part_number) for u in urls
        ]
    )


@router.post(
    "/complete-multipart-upload",
    response_model=ApiResponse[CompletedUploadOut],
    summary="Complete multipart upload",
    description="Assemble the uploaded parts and report the final object size.",
)
def complete_multipart_upload(
    payload: MultipartUploadComplete,
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[CompletedUploadOut]:
    parts = [
        CompletedPart(part_number=p.part_number, etag=p.e_tag) for p in payload.parts
    ]
    try:
        completed = services.upload().complete(
            payload.file_key, UploadId(payload.file_id), parts
        )
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ApiResponse(
        payload=CompletedUploadOut(key=completed.key, size=completed.size)
    )


@router.post(
    "/abort-multipart-upload",
    response_model=ApiResponse[bool],
    summary="Abort multipart upload",
    description="Abandon an upload session; the backend discards stored parts.",
)
def abort_multipart_upload(
    payload: MultipartUploadAbort,
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[bool]:
    try:
        services.upload().abort(payload.file_key, UploadId(payload.file_id))
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ApiResponse(payload=True)
