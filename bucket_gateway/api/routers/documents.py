"""Document API router: list, remove, rename and share objects in the bucket."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from bucket_gateway.api.deps import get_services
from bucket_gateway.api.schemas.documents import DocumentOut
from bucket_gateway.api.schemas.envelope import ApiResponse
from bucket_gateway.services.base import InvalidRequestError
from bucket_gateway.services.bundle import ServiceBundle

router = APIRouter()


@router.get(
    "/list-documents",
    response_model=ApiResponse[list[DocumentOut]],
    summary="List documents",
    description=(
        "List objects under a prefix. With delimiter '/' only folder markers "
        "(keys ending in '/') are returned; otherwise only files."
    ),
)
def list_documents(
    prefix: str = Query(default=""),
    delimiter: str = Query(default=""),
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[list[DocumentOut]]:
    entries = services.document().list_documents(prefix=prefix, delimiter=delimiter)
    return ApiResponse(payload=[DocumentOut.model_validate(e) for e in entries])


@router.delete(
    "/remove-document",
    response_model=ApiResponse[bool],
    summary="Remove document",
    description="Delete a single object. Removing a missing key succeeds.",
)
def remove_document(
    file_key: str | None = Query(default=None, alias="fileKey"),
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[bool]:
    try:
        services.document().remove(file_key)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(payload=True)


@router.patch(
    "/rename-document",
    response_model=ApiResponse[bool],
    summary="Rename document",
    description=(
        "Copy the object to the new key, then delete the old key. Not atomic: "
        "if the delete fails both keys remain and a 500 describes the state."
    ),
)
def rename_document(
    old_file_key: str | None = Query(default=None, alias="oldFileKey"),
    new_file_key: str | None = Query(default=None, alias="newFileKey"),
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[bool]:
    try:
        outcome = services.document().rename(old_file_key, new_file_key)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if not outcome.succeeded:
        raise HTTPException(status_code=500, detail=outcome.describe())
    return ApiResponse(payload=True)


@router.get(
    "/generate-share-url",
    response_model=ApiResponse[str],
    summary="Generate share URL",
    description="Mint a download URL valid for expiresIn seconds.",
)
def generate_share_url(
    file_key: str | None = Query(default=None, alias="fileKey"),
    expires_in: int | None = Query(default=None, alias="expiresIn"),
    services: ServiceBundle = Depends(get_services),
) -> ApiResponse[str]:
    try:
        link = services.document().share(file_key, expires_in)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(payload=link.url)
