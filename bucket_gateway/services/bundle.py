from __future__ import annotations

from dataclasses import dataclass, field

from bucket_gateway.common.config import Settings
from bucket_gateway.infra.storage.client import StorageClient
from bucket_gateway.infra.storage.s3_client import S3StorageClient

from .base import StorageBackendNotConfiguredError
from .document_service import DocumentService
from .upload_service import UploadService


def build_storage_client(settings: Settings) -> StorageClient:
    """Build the S3 client, refusing to run without bucket and credentials."""
    missing = settings.missing_storage_settings()
    if missing:
        raise StorageBackendNotConfiguredError(
            f"Storage is not configured; missing {', '.join(missing)}"
        )
    return S3StorageClient(settings=settings)


@dataclass
class ServiceBundle:
    """Lazily constructs application services sharing one storage client."""

    settings: Settings
    storage_client: StorageClient | None = None
    _upload: UploadService | None = field(default=None, init=False, repr=False)
    _document: DocumentService | None = field(default=None, init=False, repr=False)

    def storage(self) -> StorageClient:
        if self.storage_client is None:
            self.storage_client = build_storage_client(self.settings)
        return self.storage_client

    def upload(self) -> UploadService:
        if self._upload is None:
            self._upload = UploadService(self.storage(), self.settings)
        return self._upload

    def document(self) -> DocumentService:
        if self._document is None:
            self._document = DocumentService(self.storage(), self.settings)
        return self._document
