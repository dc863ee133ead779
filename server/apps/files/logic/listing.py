"""Business logic for listing and showing a user's files."""

import logging

from django.conf import settings

from server.apps.files.domain import (
    ROOT_PARENT_ID,
    FileQuery,
    FileRecord,
    Identity,
    coerce_id,
)
from server.apps.files.exceptions import InvalidRequestError, NotFoundError
from server.apps.files.infrastructure.metadata_store import (
    MetadataStore,
    get_metadata_store,
)
from server.apps.files.logic.access_control import require_identity

logger = logging.getLogger(__name__)


def get_page_size() -> int:
    """Get number of records per listing page.

    Returns:
        Page size from settings or default of 20.
    """
    return getattr(settings, 'FILES_PAGE_SIZE', 20)


def list_files(
    identity: Identity | None,
    parent_id: int | str | None = ROOT_PARENT_ID,
    page: int | str | None = 0,
    *,
    store: MetadataStore | None = None,
) -> list[FileRecord]:
    """List the caller's records directly under a parent.

    Records come back in store order (insertion order), one page at a
    time. Pages past the end are empty.

    Args:
        identity: Authenticated caller.
        parent_id: Parent folder id; root when 0 or empty.
        page: Zero-based page number.
        store: Metadata store; Django ORM when omitted.

    Returns:
        Records of the requested page.

    Raises:
        UnauthenticatedError: If the caller is anonymous.
        InvalidRequestError: If page is not a non-negative integer.
    """
    owner = require_identity(identity)
    page_number = _parse_page(page)
    store = store or get_metadata_store()

    if parent_id in (None, ''):
        parent = ROOT_PARENT_ID
    else:
        parent = coerce_id(parent_id)
    if parent is None:
        # Unparseable ids cannot match any folder
        return []

    page_size = get_page_size()
    logger.debug(
        'Listing files: owner=%d, parent=%d, page=%d',
        owner.user_id,
        parent,
        page_number,
    )
    return store.find_many(
        FileQuery(owner_id=owner.user_id, parent_id=parent),
        skip=page_number * page_size,
        limit=page_size,
    )


def get_file(
    identity: Identity | None,
    file_id: int | str,
    *,
    store: MetadataStore | None = None,
) -> FileRecord:
    """Show one of the caller's records.

    Only the owner sees a record here, public or not.

    Args:
        identity: Authenticated caller.
        file_id: Record id.
        store: Metadata store; Django ORM when omitted.

    Returns:
        The record.

    Raises:
        UnauthenticatedError: If the caller is anonymous.
        NotFoundError: If the caller owns no record with that id.
    """
    owner = require_identity(identity)
    record_id = coerce_id(file_id)
    if record_id is None:
        raise NotFoundError()

    store = store or get_metadata_store()
    record = store.find_one(
        FileQuery(file_id=record_id, owner_id=owner.user_id),
    )
    if record is None:
        raise NotFoundError()
    return record


def _parse_page(page: int | str | None) -> int:
    if page in (None, ''):
        return 0
    page_number = coerce_id(page)
    if page_number is None or page_number < 0:
        raise InvalidRequestError('Invalid page')
    return page_number
