"""Database models for the background job queue."""

from typing import ClassVar, Final, final, override

from django.db import models
from django.utils import timezone

_QUEUE_NAME_MAX_LENGTH: Final = 100
_STATUS_MAX_LENGTH: Final = 20


class JobStatus(models.TextChoices):
    """Lifecycle of a queued job."""

    QUEUED = 'queued', 'Queued'
    RUNNING = 'running', 'Running'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'


@final
class Job(models.Model):
    """Unit of background work consumed by the worker.

    A job is picked up once ``available_at`` has passed. Failed attempts
    put it back in the queue with a later ``available_at`` until
    ``max_attempts`` is reached.
    """

    queue_name = models.CharField(
        max_length=_QUEUE_NAME_MAX_LENGTH,
        db_index=True,
        help_text='Queue the job was enqueued on',
    )

    payload = models.JSONField(
        default=dict,
        help_text='Handler input',
    )

    status = models.CharField(
        max_length=_STATUS_MAX_LENGTH,
        choices=JobStatus.choices,
        default=JobStatus.QUEUED,
        db_index=True,
    )

    attempts = models.PositiveIntegerField(default=0)

    max_attempts = models.PositiveIntegerField(default=3)

    error_message = models.TextField(blank=True, default='')

    available_at = models.DateTimeField(
        default=timezone.now,
        help_text='Earliest time the job may run',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Job'  # type: ignore[mutable-override]
        verbose_name_plural = 'Jobs'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['created_at', 'id']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize polling for the next available job
            models.Index(
                fields=['status', 'queue_name', 'available_at'],
                name='jobs_poll_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.queue_name}#{self.pk} ({self.status})'
