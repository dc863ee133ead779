"""Queue consumers of the files app."""

from functools import partial

from server.apps.files.infrastructure.metadata_store import MetadataStore
from server.apps.files.infrastructure.storage import BlobStore
from server.apps.files.logic.ingestion import THUMBNAIL_QUEUE
from server.apps.files.logic.notifications import (
    WELCOME_QUEUE,
    Notifier,
    handle_welcome_job,
)
from server.apps.files.logic.thumbnails import handle_thumbnail_job
from server.apps.jobs.logic.queue import JobQueue


def register_consumers(
    queue: JobQueue,
    *,
    store: MetadataStore | None = None,
    blobs: BlobStore | None = None,
    notifier: Notifier | None = None,
) -> JobQueue:
    """Attach the thumbnail and welcome consumers to a queue.

    Args:
        queue: Queue the worker polls.
        store: Metadata store for thumbnail jobs.
        blobs: Blob store for thumbnail jobs.
        notifier: Channel for welcome notifications.

    Returns:
        The same queue, for chaining.
    """
    queue.process(
        THUMBNAIL_QUEUE,
        partial(handle_thumbnail_job, store=store, blobs=blobs),
    )
    queue.process(
        WELCOME_QUEUE,
        partial(handle_welcome_job, notifier=notifier),
    )
    return queue
