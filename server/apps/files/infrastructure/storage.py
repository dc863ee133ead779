"""Blob storage backends for raw and derived file bytes.

Both backends are regular Django storages (local content directory or
S3-compatible bucket via django-storages) extended with the small blob
API the logic layer relies on: write, read, exists and rollback.
"""

import logging
from typing import Protocol, final

from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage, storages
from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import BlobNotFoundError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Blob operations used by the files logic layer."""

    def write(self, name: str, data: bytes) -> str:
        """Store bytes under ``name`` and return the actual blob path."""

    def read(self, name: str) -> bytes:
        """Return bytes stored at ``name``."""

    def exists(self, name: str) -> bool:
        """Check whether a blob exists at ``name``."""

    def rollback_write(self, name: str) -> None:
        """Best-effort removal of a blob written by a failed operation."""


class BlobOperationsMixin:
    """Blob API on top of any Django storage backend.

    Blob paths are append-only: new content always gets a new name,
    existing blobs are never rewritten in place.
    """

    def write(self, name: str, data: bytes) -> str:
        """Write bytes to storage with error handling and logging.

        Args:
            name: Requested blob path.
            data: Raw bytes to store.

        Returns:
            Actual blob path used (may differ from name if it was taken).

        Raises:
            Exception: If the storage backend fails.
        """
        try:
            logger.info('Writing blob to storage: %s', name)
            saved_name = self.save(name, ContentFile(data))
            logger.info(
                'Successfully wrote blob: %s (%d bytes)',
                saved_name,
                len(data),
            )
        except Exception:
            logger.exception('Failed to write blob to storage: %s', name)
            raise
        else:
            return saved_name

    def read(self, name: str) -> bytes:
        """Read a whole blob.

        Args:
            name: Blob path.

        Returns:
            Blob bytes.

        Raises:
            BlobNotFoundError: If no blob exists at ``name``.
        """
        if not self.exists(name):
            raise BlobNotFoundError(name)
        with self.open(name, 'rb') as blob:
            return blob.read()

    def rollback_write(self, name: str) -> None:
        """Delete a blob written by an operation that failed afterwards.

        Called when the metadata record could not be persisted after its
        bytes were written. Failures are logged and swallowed: the
        record never existed, so the blob is only an orphan.

        Args:
            name: Blob path to delete.
        """
        try:
            logger.warning('Rolling back blob write, deleting: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back blob write: %s', name)
        except Exception:
            logger.exception(
                'Failed to rollback blob write, orphaned blob: %s',
                name,
            )


@final
class LocalBlobStore(BlobOperationsMixin, FileSystemStorage):
    """Blob store backed by a local content directory.

    The directory (``location``) is created on first write.
    """


@final
class S3BlobStore(BlobOperationsMixin, S3Storage):
    """Blob store backed by an S3-compatible bucket (MinIO, R2, AWS)."""


def get_blob_store() -> BlobStore:
    """Get the configured default blob store.

    Returns:
        Storage configured under ``STORAGES['default']``.
    """
    return storages['default']  # type: ignore[return-value]
