"""Business logic for creating folders and uploading files."""

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Final

from django.core.exceptions import ValidationError

from server.apps.files.domain import (
    ROOT_PARENT_ID,
    FileKind,
    FileQuery,
    FileRecord,
    Identity,
    UploadRequest,
    coerce_id,
)
from server.apps.files.exceptions import (
    InvalidParentError,
    InvalidRequestError,
    ParentNotFoundError,
)
from server.apps.files.infrastructure.metadata import decode_payload
from server.apps.files.infrastructure.metadata_store import (
    MetadataStore,
    get_metadata_store,
)
from server.apps.files.infrastructure.storage import BlobStore, get_blob_store
from server.apps.files.logic.access_control import require_identity
from server.apps.jobs.logic.queue import JobProducer, JobQueue

logger = logging.getLogger(__name__)

# Queue consumed by the thumbnail worker
THUMBNAIL_QUEUE: Final = 'fileQueue'


def parse_upload_request(body: Mapping[str, Any]) -> UploadRequest:
    """Build an upload request from a decoded request body.

    Args:
        body: ``{name, type, parentId?, isPublic?, data?}``.

    Returns:
        Typed upload request; values are validated by ``upload``.
    """
    return UploadRequest(
        name=body.get('name'),
        kind=body.get('type'),
        parent_id=body.get('parentId', ROOT_PARENT_ID),
        is_public=_parse_flag(body.get('isPublic', False)),
        data=body.get('data'),
    )


def _parse_flag(raw_flag: object) -> bool:
    """Read a boolean sent as JSON bool or as a 'true'/'false' string."""
    if isinstance(raw_flag, str):
        return raw_flag.strip().lower() == 'true'
    return raw_flag is True


def upload(
    identity: Identity | None,
    request: UploadRequest,
    *,
    store: MetadataStore | None = None,
    blobs: BlobStore | None = None,
    queue: JobProducer | None = None,
) -> FileRecord:
    """Create a folder, or store an uploaded file and its metadata.

    Bytes are written before the record is persisted; if persisting
    fails the blob is removed again. For images a thumbnail job is
    enqueued afterwards on a best-effort basis: a failed enqueue is
    logged and the created record stays.

    Args:
        identity: Authenticated caller.
        request: Upload request.
        store: Metadata store; Django ORM when omitted.
        blobs: Blob store; default storage when omitted.
        queue: Job queue; database queue when omitted.

    Returns:
        Created record with its store-assigned id.

    Raises:
        UnauthenticatedError: If the caller is anonymous.
        InvalidRequestError: If name, type or data is missing or invalid.
        ParentNotFoundError: If the parent record does not exist.
        InvalidParentError: If the parent record is not a folder.
    """
    owner = require_identity(identity)
    kind = _validate_request(request)
    store = store or get_metadata_store()
    parent_id = _resolve_parent(store, request.parent_id)

    record = FileRecord(
        owner_id=owner.user_id,
        name=request.name or '',
        kind=kind,
        is_public=request.is_public,
        parent_id=parent_id,
    )

    if kind == FileKind.FOLDER:
        store.insert(record)
        logger.info(
            'Folder created: %s (ID: %d, owner: %d)',
            record.name,
            record.id,
            owner.user_id,
        )
        return record

    try:
        payload = decode_payload(request.data or '')
    except ValidationError as error:
        raise InvalidRequestError('Invalid data') from error

    blobs = blobs or get_blob_store()
    record.blob_path = blobs.write(str(uuid.uuid4()), payload)

    try:
        store.insert(record)
    except Exception:
        logger.exception(
            'Metadata insert failed, rolling back blob write: %s',
            record.blob_path,
        )
        blobs.rollback_write(record.blob_path)
        raise

    logger.info(
        'File uploaded: %s (ID: %d, kind: %s, %d bytes)',
        record.name,
        record.id,
        kind,
        len(payload),
    )

    if kind == FileKind.IMAGE:
        _enqueue_thumbnails(queue or JobQueue(), record)

    return record


def _validate_request(request: UploadRequest) -> FileKind:
    """Check the request fields that need no store access.

    Args:
        request: Upload request.

    Returns:
        Parsed record kind.

    Raises:
        InvalidRequestError: If name, type or data is missing or invalid.
    """
    if not request.name:
        raise InvalidRequestError('Missing name')

    try:
        kind = FileKind(request.kind)
    except ValueError as error:
        raise InvalidRequestError('Missing type') from error

    if kind != FileKind.FOLDER and not request.data:
        raise InvalidRequestError('Missing data')
    if kind != FileKind.FOLDER and not isinstance(request.data, str):
        raise InvalidRequestError('Invalid data')

    return kind


def _resolve_parent(store: MetadataStore, raw_parent_id: object) -> int:
    """Validate the requested parent.

    Args:
        store: Metadata store.
        raw_parent_id: Parent id as received; root when 0 or empty.

    Returns:
        Parent id to store (ROOT_PARENT_ID for the root).

    Raises:
        ParentNotFoundError: If the parent record does not exist.
        InvalidParentError: If the parent record is not a folder.
    """
    if raw_parent_id in (None, '', ROOT_PARENT_ID, str(ROOT_PARENT_ID)):
        return ROOT_PARENT_ID

    parent_id = coerce_id(raw_parent_id)
    parent = None
    if parent_id is not None:
        parent = store.find_one(FileQuery(file_id=parent_id))
    if parent is None:
        raise ParentNotFoundError()
    if not parent.is_folder:
        raise InvalidParentError()
    return parent_id


def _enqueue_thumbnails(queue: JobProducer, record: FileRecord) -> None:
    """Request thumbnail generation for an uploaded image.

    Args:
        queue: Job queue.
        record: Persisted image record.
    """
    try:
        queue.enqueue(
            THUMBNAIL_QUEUE,
            {'ownerId': record.owner_id, 'fileId': record.id},
        )
    except Exception:
        # The image itself is stored; only its thumbnails are lost
        logger.exception(
            'Failed to enqueue thumbnail job for file %d',
            record.id,
        )
