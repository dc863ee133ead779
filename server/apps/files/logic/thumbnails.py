"""Thumbnail generation for uploaded images.

Consumes jobs from the thumbnail queue. Each width is produced by its
own task; a failing width is logged and does not affect the others or
the job outcome.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from io import BytesIO
from typing import Any

from PIL import Image

from server.apps.files.domain import (
    THUMBNAIL_WIDTHS,
    FileQuery,
    FileRecord,
    coerce_id,
)
from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    MissingFieldError,
)
from server.apps.files.infrastructure.metadata_store import (
    MetadataStore,
    get_metadata_store,
)
from server.apps.files.infrastructure.storage import BlobStore, get_blob_store

logger = logging.getLogger(__name__)

ThumbnailGenerator = Callable[[bytes, int], bytes]


def generate_thumbnail(source: bytes, width: int) -> bytes:
    """Resize an image to ``width`` keeping its aspect ratio.

    Args:
        source: Encoded image bytes (PNG, JPEG, GIF, ...).
        width: Target width in pixels.

    Returns:
        Resized image encoded in the source format.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not an image.
    """
    with Image.open(BytesIO(source)) as image:
        image_format = image.format or 'PNG'
        height = max(1, round(image.height * width / image.width))
        resized = image.resize((width, height), Image.Resampling.LANCZOS)

    buffer = BytesIO()
    resized.save(buffer, format=image_format)
    return buffer.getvalue()


def handle_thumbnail_job(
    payload: Mapping[str, Any],
    *,
    store: MetadataStore | None = None,
    blobs: BlobStore | None = None,
    generator: ThumbnailGenerator = generate_thumbnail,
    widths: Iterable[int] = THUMBNAIL_WIDTHS,
) -> dict[int, bool]:
    """Generate all thumbnail variants of an uploaded image.

    Args:
        payload: ``{ownerId, fileId}`` job payload.
        store: Metadata store; Django ORM when omitted.
        blobs: Blob store; default storage when omitted.
        generator: Function producing the resized bytes.
        widths: Variant widths to produce.

    Returns:
        Mapping of width to whether its variant is present afterwards.

    Raises:
        MissingFieldError: If fileId or ownerId is absent.
        FileRecordNotFoundError: If the owner has no such file.
    """
    file_id = payload.get('fileId')
    if not file_id:
        raise MissingFieldError('fileId')
    owner_id = payload.get('ownerId')
    if not owner_id:
        raise MissingFieldError('ownerId')

    store = store or get_metadata_store()
    record = _find_source(store, file_id, owner_id)
    blobs = blobs or get_blob_store()

    widths = tuple(widths)
    with ThreadPoolExecutor(max_workers=len(widths) or 1) as executor:
        tasks: dict[int, Future[None]] = {
            width: executor.submit(
                _write_variant,
                blobs,
                record,
                width,
                generator,
            )
            for width in widths
        }

    results: dict[int, bool] = {}
    for width, task in tasks.items():
        try:
            task.result()
        except Exception:
            logger.exception(
                'Error generating thumbnail %d for file %d',
                width,
                record.id,
            )
            results[width] = False
        else:
            results[width] = True

    logger.info(
        'Thumbnails for file %d done: %d/%d generated',
        record.id,
        sum(results.values()),
        len(results),
    )
    return results


def _find_source(
    store: MetadataStore,
    file_id: object,
    owner_id: object,
) -> FileRecord:
    record_id = coerce_id(file_id)
    record_owner = coerce_id(owner_id)
    record = None
    if record_id is not None and record_owner is not None:
        record = store.find_one(
            FileQuery(file_id=record_id, owner_id=record_owner),
        )
    if record is None or record.blob_path is None:
        raise FileRecordNotFoundError(file_id)
    return record


def _write_variant(
    blobs: BlobStore,
    record: FileRecord,
    width: int,
    generator: ThumbnailGenerator,
) -> None:
    """Produce and store one variant.

    Variants already present (from an earlier attempt) are kept as is,
    blob paths are never rewritten.
    """
    variant_path = record.variant_path(width)
    if blobs.exists(variant_path):
        logger.info('Thumbnail already present: %s', variant_path)
        return

    source = blobs.read(record.blob_path or '')
    saved_path = blobs.write(variant_path, generator(source, width))
    if saved_path != variant_path:
        # Another writer stored the variant first; drop the duplicate
        logger.warning(
            'Thumbnail %s written concurrently, discarding copy %s',
            variant_path,
            saved_path,
        )
        blobs.rollback_write(saved_path)
