"""Django admin configuration for jobs app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils import timezone

from server.apps.jobs.models import Job, JobStatus


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    """Admin interface for queued jobs."""

    list_display = [
        'id',
        'queue_name',
        'status',
        'attempts',
        'max_attempts',
        'created_at',
        'completed_at',
    ]

    list_filter = ['queue_name', 'status']

    readonly_fields = [
        'payload',
        'attempts',
        'error_message',
        'created_at',
        'started_at',
        'completed_at',
    ]

    actions = ['requeue_jobs']

    @admin.action(description='Requeue selected failed jobs')
    def requeue_jobs(self, request: HttpRequest, queryset: QuerySet[Job]) -> None:
        """Put failed jobs back in their queue with fresh attempts.

        Args:
            request: HTTP request.
            queryset: Selected jobs.
        """
        requeued = queryset.filter(status=JobStatus.FAILED).update(
            status=JobStatus.QUEUED,
            attempts=0,
            available_at=timezone.now(),
            completed_at=None,
        )
        self.message_user(request, f'Requeued {requeued} job(s)')
