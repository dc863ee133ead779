"""Business logic for reading file content and thumbnail variants."""

import logging

from server.apps.files.domain import (
    THUMBNAIL_WIDTHS,
    FileContent,
    FileQuery,
    FileRecord,
    Identity,
    coerce_id,
)
from server.apps.files.exceptions import (
    BlobNotFoundError,
    InvalidRequestError,
    NotFoundError,
)
from server.apps.files.infrastructure.metadata import detect_mime_type
from server.apps.files.infrastructure.metadata_store import (
    MetadataStore,
    get_metadata_store,
)
from server.apps.files.infrastructure.storage import BlobStore, get_blob_store
from server.apps.files.logic.access_control import ensure_readable

logger = logging.getLogger(__name__)


def resolve_blob_path(record: FileRecord, size: int | str | None) -> str:
    """Pick the blob holding the requested size.

    Args:
        record: Non-folder record.
        size: Size hint; a thumbnail width selects that variant, any
            other value selects the original.

    Returns:
        Blob path of the original or of the variant.
    """
    width = _parse_size(size)
    if width is None:
        return record.blob_path or ''
    return record.variant_path(width)


def fetch(
    identity: Identity | None,
    file_id: int | str,
    size: int | str | None = None,
    *,
    store: MetadataStore | None = None,
    blobs: BlobStore | None = None,
) -> FileContent:
    """Read the content of a file or of one of its thumbnails.

    Anonymous callers may read public files. Variants that were not
    generated (yet) are reported as not found, like any missing blob.

    Args:
        identity: Caller, or None for anonymous.
        file_id: Record id.
        size: Optional thumbnail width (100, 250 or 500).
        store: Metadata store; Django ORM when omitted.
        blobs: Blob store; default storage when omitted.

    Returns:
        Bytes and content type guessed from the record name.

    Raises:
        NotFoundError: If the record or blob is missing, or access is denied.
        InvalidRequestError: If the record is a folder.
    """
    record_id = coerce_id(file_id)
    if record_id is None:
        raise NotFoundError()

    store = store or get_metadata_store()
    record = store.find_one(FileQuery(file_id=record_id))
    if record is None:
        raise NotFoundError()

    ensure_readable(identity, record)

    if record.is_folder:
        raise InvalidRequestError("A folder doesn't have content")

    blob_path = resolve_blob_path(record, size)
    blobs = blobs or get_blob_store()
    try:
        data = blobs.read(blob_path)
    except BlobNotFoundError as error:
        logger.info('Blob missing for file %d: %s', record_id, blob_path)
        raise NotFoundError() from error

    return FileContent(data=data, content_type=detect_mime_type(record.name))


def _parse_size(size: int | str | None) -> int | None:
    if size is None:
        return None
    width = coerce_id(size)
    if width in THUMBNAIL_WIDTHS:
        return width
    return None
