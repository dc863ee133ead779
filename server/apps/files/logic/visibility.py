"""Business logic for publishing and unpublishing files."""

import logging

from server.apps.files.domain import (
    FilePatch,
    FileQuery,
    FileRecord,
    Identity,
    coerce_id,
)
from server.apps.files.exceptions import NotFoundError
from server.apps.files.infrastructure.metadata_store import (
    MetadataStore,
    get_metadata_store,
)
from server.apps.files.logic.access_control import require_identity

logger = logging.getLogger(__name__)


def set_public(
    identity: Identity | None,
    file_id: int | str,
    is_public: bool,
    *,
    store: MetadataStore | None = None,
) -> FileRecord:
    """Set the public flag of one of the caller's records.

    Ownership is required even for records that are already public.
    Setting the current value again is a no-op that returns the same
    record.

    Args:
        identity: Authenticated caller.
        file_id: Record id.
        is_public: New flag value.
        store: Metadata store; Django ORM when omitted.

    Returns:
        Updated record.

    Raises:
        UnauthenticatedError: If the caller is anonymous.
        NotFoundError: If the caller owns no record with that id.
    """
    owner = require_identity(identity)
    record_id = coerce_id(file_id)
    if record_id is None:
        raise NotFoundError()

    store = store or get_metadata_store()
    record = store.update_one(
        FileQuery(file_id=record_id, owner_id=owner.user_id),
        FilePatch(is_public=is_public),
    )
    if record is None:
        raise NotFoundError()

    logger.info(
        'File %d is now %s',
        record_id,
        'public' if is_public else 'private',
    )
    return record


def publish(
    identity: Identity | None,
    file_id: int | str,
    *,
    store: MetadataStore | None = None,
) -> FileRecord:
    """Make one of the caller's records public."""
    return set_public(identity, file_id, True, store=store)  # noqa: WPS425


def unpublish(
    identity: Identity | None,
    file_id: int | str,
    *,
    store: MetadataStore | None = None,
) -> FileRecord:
    """Make one of the caller's records private."""
    return set_public(identity, file_id, False, store=store)  # noqa: WPS425
