from .base import (
    BaseService,
    InvalidRequestError,
    ServiceError,
    StorageBackendNotConfiguredError,
)
from .bundle import ServiceBundle, build_storage_client
from .document_service import (
    DocumentService,
    RenameOutcome,
    RenameStatus,
    ShareLink,
    filter_entries,
)
from .upload_service import CompletedUpload, PartUrl, UploadService, order_parts

__all__ = [
    "BaseService",
    "ServiceError",
    "InvalidRequestError",
    "StorageBackendNotConfiguredError",
    "ServiceBundle",
    "build_storage_client",
    "DocumentService",
    "RenameOutcome",
    "RenameStatus",
    "ShareLink",
    "filter_entries",
    "UploadService",
    "PartUrl",
    "CompletedUpload",
    "order_parts",
]
