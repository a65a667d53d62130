"""Directory-style operations on the bucket namespace.

Listing, removal, rename and time-limited share links. Rename is a copy
followed by a delete because S3 has no rename primitive, so it is not
atomic: if the delete fails after a successful copy, both keys exist and
the outcome says so.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from bucket_gateway.infra.storage.client import ObjectEntry, StorageError
from bucket_gateway.services.base import BaseService, InvalidRequestError

FOLDER_DELIMITER = "/"
# SigV4 presigned URLs cannot outlive seven days.
MAX_SHARE_EXPIRES_SECONDS = 7 * 24 * 60 * 60

logger = logging.getLogger("storage")


class RenameStatus(str, Enum):
    RENAMED = "renamed"
    COPY_FAILED = "copy_failed"
    COPIED_BUT_DELETE_FAILED = "copied_but_delete_failed"


@dataclass(frozen=True, slots=True)
class RenameOutcome:
    """Result of a copy-then-delete rename."""

    status: RenameStatus
    old_key: str
    new_key: str
    error: StorageError | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is RenameStatus.RENAMED

    def describe(self) -> str:
        if self.status is RenameStatus.COPY_FAILED:
            return f"{self.error}"
        if self.status is RenameStatus.COPIED_BUT_DELETE_FAILED:
            return (
                f"Copied '{self.old_key}' to '{self.new_key}' but could not delete "
                f"the original; both keys now exist: {self.error}"
            )
        return f"Renamed '{self.old_key}' to '{self.new_key}'"


@dataclass(frozen=True, slots=True)
class ShareLink:
    """Presigned read URL for an object."""

    url: str
    expires_in: int


def filter_entries(
    entries: Iterable[ObjectEntry], delimiter: str
) -> list[ObjectEntry]:
    """Keep folder markers for the "/" delimiter and plain files otherwise.

    Backend order is preserved.
    """
    if delimiter == FOLDER_DELIMITER:
        return [entry for entry in entries if entry.key.endswith(FOLDER_DELIMITER)]
    return [entry for entry in entries if not entry.key.endswith(FOLDER_DELIMITER)]


class DocumentService(BaseService):
    """Application service for object directory operations."""

    def list_documents(
        self, *, prefix: str = "", delimiter: str = ""
    ) -> list[ObjectEntry]:
        """List folder markers or files under prefix.

        Args:
            prefix: Key prefix passed to the backend listing.
            delimiter: "/" selects folder markers; anything else selects files.

        Returns:
            Matching entries in the order the backend returned them.
        """
        entries = self._storage.list_objects(
            bucket=self.bucket,
            prefix=prefix or "",
            delimiter=delimiter or "",
        )
        return filter_entries(entries, delimiter or "")

    def remove(self, object_key: str | None) -> None:
        """Delete a single object. Deleting a missing key is not an error."""
        key = self._require_key(object_key, "fileKey")
        self._storage.delete_object(bucket=self.bucket, object_key=key)
        logger.info("document_removed key=%s", key, extra={"extra": {"key": key}})

    def rename(self, old_key: str | None, new_key: str | None) -> RenameOutcome:
        """Copy old_key to new_key, then delete old_key.

        The delete is only attempted after a successful copy. Storage
        failures are reported in the returned outcome rather than raised.

        Raises:
            InvalidRequestError: If either key is empty or both are equal.
        """
        source = self._require_key(old_key, "oldFileKey")
        target = self._require_key(new_key, "newFileKey")
        if source == target:
            raise InvalidRequestError("oldFileKey and newFileKey must differ")

        try:
            self._storage.copy_object(
                bucket=self.bucket, source_key=source, target_key=target
            )
        except StorageError as exc:
            logger.warning(
                "document_rename_copy_failed old_key=%s new_key=%s error=%s",
                source,
                target,
                exc,
                extra={"extra": {"old_key": source, "new_key": target}},
            )
            return RenameOutcome(
                status=RenameStatus.COPY_FAILED,
                old_key=source,
                new_key=target,
                error=exc,
            )

        try:
            self._storage.delete_object(bucket=self.bucket, object_key=source)
        except StorageError as exc:
            logger.error(
                "document_rename_delete_failed old_key=%s new_key=%s error=%s",
                source,
                target,
                exc,
                extra={
                    "extra": {
                        "old_key": source,
                        "new_key": target,
                        "both_keys_present": True,
                    }
                },
            )
            return RenameOutcome(
                status=RenameStatus.COPIED_BUT_DELETE_FAILED,
                old_key=source,
                new_key=target,
                error=exc,
            )

        logger.info(
            "document_renamed old_key=%s new_key=%s",
            source,
            target,
            extra={"extra": {"old_key": source, "new_key": target}},
        )
        return RenameOutcome(
            status=RenameStatus.RENAMED, old_key=source, new_key=target
        )

    def share(self, object_key: str | None, expires_in: int | None) -> ShareLink:
        """Mint a download URL valid for exactly expires_in seconds.

        Both inputs are validated before the backend is contacted.

        Raises:
            InvalidRequestError: If the key is empty or expires_in is missing,
                not positive, or beyond MAX_SHARE_EXPIRES_SECONDS.
            StorageError: If URL generation fails.
        """
        key = self._require_key(object_key, "fileKey")
        if expires_in is None or expires_in <= 0:
            raise InvalidRequestError("Invalid or missing expiresIn parameter")
        if expires_in > MAX_SHARE_EXPIRES_SECONDS:
            raise InvalidRequestError(
                f"expiresIn cannot exceed {MAX_SHARE_EXPIRES_SECONDS} seconds"
            )

        url = self._storage.presign_download(
            bucket=self.bucket,
            object_key=key,
            expires_in=int(expires_in),
        )
        return ShareLink(url=url, expires_in=int(expires_in))
