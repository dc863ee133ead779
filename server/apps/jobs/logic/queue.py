"""Database-backed job queue.

Producers call ``enqueue`` and return immediately. A worker process
registers handlers with ``process`` and polls with ``run_forever``.
A handler that raises fails the attempt; the job is retried with a
growing delay until ``max_attempts`` is reached.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, Final, Protocol

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from server.apps.jobs.models import Job, JobStatus

logger = logging.getLogger(__name__)

JobHandler = Callable[[dict[str, Any]], object]


class JobProducer(Protocol):
    """Anything jobs can be enqueued on."""

    def enqueue(self, queue_name: str, payload: Mapping[str, Any]) -> object:
        """Add a job to a queue."""


_ERROR_MESSAGE_MAX_LENGTH: Final = 2000


def get_poll_interval() -> float:
    """Get idle polling interval in seconds.

    Returns:
        Interval from settings or default of 1.0.
    """
    return getattr(settings, 'JOB_POLL_INTERVAL', 1.0)


def get_max_attempts() -> int:
    """Get attempts per job before it is marked failed.

    Returns:
        Attempts from settings or default of 3.
    """
    return getattr(settings, 'JOB_MAX_ATTEMPTS', 3)


def get_retry_delay() -> int:
    """Get base retry delay in seconds.

    Returns:
        Delay from settings or default of 5.
    """
    return getattr(settings, 'JOB_RETRY_DELAY', 5)


def safe_error_message(error: Exception) -> str:
    """Extract a storable message from an exception.

    Some exceptions stringify to an empty message; the class name is
    used instead.

    Args:
        error: Exception raised by a handler.

    Returns:
        Non-empty message, truncated for storage.
    """
    message = str(error).strip() or type(error).__name__
    return message[:_ERROR_MESSAGE_MAX_LENGTH]


class JobQueue:
    """Producer and consumer side of the job queue."""

    def __init__(
        self,
        *,
        poll_interval: float | None = None,
        max_attempts: int | None = None,
        retry_delay: int | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            poll_interval: Idle sleep in seconds; settings when omitted.
            max_attempts: Attempts per new job; settings when omitted.
            retry_delay: Base retry delay in seconds; settings when omitted.
        """
        self.poll_interval = (
            get_poll_interval() if poll_interval is None else poll_interval
        )
        self.max_attempts = (
            get_max_attempts() if max_attempts is None else max_attempts
        )
        self.retry_delay = (
            get_retry_delay() if retry_delay is None else retry_delay
        )
        self._handlers: dict[str, JobHandler] = {}

    @property
    def queue_names(self) -> list[str]:
        """Queues with a registered handler."""
        return list(self._handlers)

    def enqueue(self, queue_name: str, payload: Mapping[str, Any]) -> Job:
        """Add a job to a queue.

        Runs in its own savepoint, so a failed insert leaves the
        caller's transaction usable.

        Args:
            queue_name: Target queue.
            payload: JSON-serializable handler input.

        Returns:
            Created Job instance.
        """
        with transaction.atomic():
            job = Job.objects.create(
                queue_name=queue_name,
                payload=dict(payload),
                max_attempts=self.max_attempts,
            )
        logger.info('Enqueued job %d on %s', job.pk, queue_name)
        return job

    def process(self, queue_name: str, handler: JobHandler) -> None:
        """Register the consumer of a queue.

        Args:
            queue_name: Queue to consume.
            handler: Callable receiving the job payload.
        """
        self._handlers[queue_name] = handler
        logger.debug('Registered handler for queue %s', queue_name)

    def unregister(self, queue_name: str) -> None:
        """Stop consuming a queue.

        Args:
            queue_name: Queue to drop.
        """
        self._handlers.pop(queue_name, None)

    def claim_next(self) -> Job | None:
        """Claim the oldest available job of a registered queue.

        The row is locked while it is marked running, so concurrent
        workers never claim the same job.

        Returns:
            Claimed job, or None when nothing is available.
        """
        if not self._handlers:
            return None

        now = timezone.now()
        with transaction.atomic():
            job = (
                Job.objects.select_for_update(skip_locked=True)
                .filter(
                    status=JobStatus.QUEUED,
                    queue_name__in=self.queue_names,
                    available_at__lte=now,
                )
                .order_by('created_at', 'id')
                .first()
            )
            if job is None:
                return None

            job.status = JobStatus.RUNNING
            job.attempts += 1
            job.started_at = now
            job.save(update_fields=['status', 'attempts', 'started_at'])

        return job

    def run_once(self) -> Job | None:
        """Claim and run a single job.

        Returns:
            The job that was run (in its final state for this attempt),
            or None when the queue was empty.
        """
        job = self.claim_next()
        if job is None:
            return None

        logger.info(
            'Processing job %d (queue=%s, attempt %d/%d)',
            job.pk,
            job.queue_name,
            job.attempts,
            job.max_attempts,
        )
        handler = self._handlers[job.queue_name]
        try:
            handler(job.payload)
        except Exception as error:
            logger.exception('Job %d failed', job.pk)
            self._record_failure(job, error)
        else:
            job.status = JobStatus.COMPLETED
            job.completed_at = timezone.now()
            job.error_message = ''
            job.save(update_fields=['status', 'completed_at', 'error_message'])
            logger.info('Job %d completed', job.pk)
        return job

    def run_forever(self, stop_event: threading.Event | None = None) -> None:
        """Poll for jobs until ``stop_event`` is set.

        Args:
            stop_event: Event that ends the loop; runs forever when None.
        """
        stop_event = stop_event or threading.Event()
        logger.info('Job worker started for queues: %s', self.queue_names)
        while not stop_event.is_set():
            try:
                job = self.run_once()
            except Exception:
                # Keep the worker alive on database hiccups
                logger.exception('Worker loop error')
                job = None
            if job is None:
                stop_event.wait(self.poll_interval)
        logger.info('Job worker stopped')

    def _record_failure(self, job: Job, error: Exception) -> None:
        """Re-queue a failed job or mark it failed for good.

        Args:
            job: Job whose handler raised.
            error: Raised exception.
        """
        job.error_message = safe_error_message(error)
        if job.attempts < job.max_attempts:
            delay = timedelta(seconds=self.retry_delay * job.attempts)
            job.status = JobStatus.QUEUED
            job.available_at = timezone.now() + delay
            logger.warning(
                'Job %d will be retried in %s',
                job.pk,
                delay,
            )
        else:
            job.status = JobStatus.FAILED
            job.completed_at = timezone.now()
            logger.error(
                'Job %d failed after %d attempts: %s',
                job.pk,
                job.attempts,
                job.error_message,
            )
        job.save(update_fields=[
            'status',
            'error_message',
            'available_at',
            'completed_at',
        ])


def recover_stale_jobs(stale_minutes: int | None = None) -> int:
    """Mark jobs stuck in 'running' as failed.

    Call on worker startup to recover from crashes that left jobs
    stranded mid-run.

    Args:
        stale_minutes: Running time after which a job counts as stale;
            ``JOB_STALE_MINUTES`` when omitted.

    Returns:
        Number of recovered jobs.
    """
    if stale_minutes is None:
        stale_minutes = getattr(settings, 'JOB_STALE_MINUTES', 15)
    cutoff = timezone.now() - timedelta(minutes=stale_minutes)

    recovered = Job.objects.filter(
        status=JobStatus.RUNNING,
        started_at__lt=cutoff,
    ).update(
        status=JobStatus.FAILED,
        error_message=(
            f'Recovered on startup: job was running for >{stale_minutes} '
            'minutes'
        ),
        completed_at=timezone.now(),
    )
    if recovered:
        logger.warning('Recovered %d stale job(s)', recovered)
    return recovered
