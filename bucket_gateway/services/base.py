from __future__ import annotations

from bucket_gateway.common.config import Settings
from bucket_gateway.infra.storage.client import StorageClient


class ServiceError(Exception):
    """Base class for application service level exceptions."""


class InvalidRequestError(ServiceError):
    """Raised when client input is rejected before any storage call."""


class StorageBackendNotConfiguredError(ServiceError):
    """Raised when the storage backend is not properly configured."""


class BaseService:
    """Provides guard rails and helpers shared by application services."""

    def __init__(self, storage: StorageClient, settings: Settings):
        self._storage = storage
        self._settings = settings

    @property
    def storage(self) -> StorageClient:
        return self._storage

    @property
    def bucket(self) -> str:
        return self._settings.S3_BUCKET_NAME

    def _require_key(self, value: str | None, field_name: str) -> str:
        if value is None or not value.strip():
            raise InvalidRequestError(f"{field_name} is required")
        return value
