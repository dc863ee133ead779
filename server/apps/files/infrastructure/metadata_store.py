"""File metadata persistence.

The logic layer talks to a ``MetadataStore``; ``DjangoMetadataStore`` is
the production implementation over the ``File`` model. Queries are
expressed with ``FileQuery`` rather than ad-hoc filter dicts.
"""

import logging
from typing import Protocol, final

from django.db import transaction
from django.db.models import QuerySet

from server.apps.files.domain import (
    ROOT_PARENT_ID,
    FileKind,
    FilePatch,
    FileQuery,
    FileRecord,
)
from server.apps.files.models import File

logger = logging.getLogger(__name__)


class MetadataStore(Protocol):
    """Document-style store of file records."""

    def insert(self, record: FileRecord) -> int:
        """Persist a new record, set its ``id`` and return it."""

    def find_one(self, query: FileQuery) -> FileRecord | None:
        """Return the first record matching ``query``."""

    def find_many(
        self,
        query: FileQuery,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FileRecord]:
        """Return matching records in store order."""

    def update_one(
        self,
        query: FileQuery,
        patch: FilePatch,
    ) -> FileRecord | None:
        """Apply ``patch`` to the first match and return the new state."""

    def count(self, query: FileQuery) -> int:
        """Count records matching ``query``."""


def _to_record(file_instance: File) -> FileRecord:
    """Convert a model instance to a plain record.

    Args:
        file_instance: File model instance.

    Returns:
        FileRecord with the same field values.
    """
    return FileRecord(
        id=file_instance.pk,
        owner_id=file_instance.user_id,
        name=file_instance.name,
        kind=FileKind(file_instance.kind),
        is_public=file_instance.is_public,
        parent_id=file_instance.parent_id or ROOT_PARENT_ID,
        blob_path=file_instance.blob_path or None,
    )


def _filter(query: FileQuery) -> QuerySet[File]:
    """Translate a typed query into a queryset.

    Args:
        query: Lookup constraints.

    Returns:
        QuerySet ordered by insertion.
    """
    queryset = File.objects.all()
    if query.file_id is not None:
        queryset = queryset.filter(pk=query.file_id)
    if query.owner_id is not None:
        queryset = queryset.filter(user_id=query.owner_id)
    if query.parent_id == ROOT_PARENT_ID:
        queryset = queryset.filter(parent__isnull=True)
    elif query.parent_id is not None:
        queryset = queryset.filter(parent_id=query.parent_id)
    if query.kind is not None:
        queryset = queryset.filter(kind=query.kind)
    return queryset.order_by('pk')


@final
class DjangoMetadataStore:
    """Metadata store backed by the ``File`` model."""

    def insert(self, record: FileRecord) -> int:
        """Create a database row for the record.

        Args:
            record: New record; its ``id`` is filled in.

        Returns:
            Assigned record id.
        """
        with transaction.atomic():
            file_instance = File.objects.create(
                user_id=record.owner_id,
                name=record.name,
                kind=record.kind,
                is_public=record.is_public,
                parent_id=record.parent_id or None,
                blob_path=record.blob_path or '',
            )
        record.id = file_instance.pk
        logger.info(
            'File record created in database: %s (ID: %d)',
            record.name,
            file_instance.pk,
        )
        return file_instance.pk

    def find_one(self, query: FileQuery) -> FileRecord | None:
        """Find the first record matching the query.

        Args:
            query: Lookup constraints.

        Returns:
            Matching record or None.
        """
        file_instance = _filter(query).first()
        if file_instance is None:
            return None
        return _to_record(file_instance)

    def find_many(
        self,
        query: FileQuery,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FileRecord]:
        """Find a window of records matching the query.

        Args:
            query: Lookup constraints.
            skip: Number of leading matches to skip.
            limit: Maximum number of records; None for all.

        Returns:
            Records in insertion order.
        """
        queryset = _filter(query)
        if limit is None:
            queryset = queryset[skip:]
        else:
            queryset = queryset[skip:skip + limit]
        return [_to_record(file_instance) for file_instance in queryset]

    def update_one(
        self,
        query: FileQuery,
        patch: FilePatch,
    ) -> FileRecord | None:
        """Atomically patch the first record matching the query.

        The row is locked for the duration of the update, so concurrent
        toggles on the same record serialize; the last write wins.

        Args:
            query: Lookup constraints.
            patch: New field values.

        Returns:
            Updated record, or None if nothing matched.
        """
        with transaction.atomic():
            file_instance = _filter(query).select_for_update().first()
            if file_instance is None:
                return None
            file_instance.is_public = patch.is_public
            file_instance.save(update_fields=['is_public', 'modified_at'])
        logger.info(
            'File record updated: ID=%d, is_public=%s',
            file_instance.pk,
            patch.is_public,
        )
        return _to_record(file_instance)

    def count(self, query: FileQuery) -> int:
        """Count records matching the query.

        Args:
            query: Lookup constraints.

        Returns:
            Number of matches.
        """
        return _filter(query).count()


def get_metadata_store() -> MetadataStore:
    """Get the default metadata store.

    Returns:
        Store backed by the Django ORM.
    """
    return DjangoMetadataStore()
