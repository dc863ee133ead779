"""Signal handlers for files app."""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from server.apps.files.logic.notifications import WELCOME_QUEUE
from server.apps.jobs.logic.queue import JobQueue

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def enqueue_welcome_notification(
    sender: type,
    instance: object,
    created: bool,
    **kwargs: object,
) -> None:
    """Queue the welcome notification when a user registers.

    Args:
        sender: The user model class.
        instance: The saved user.
        created: Whether the save created the user.
        **kwargs: Additional signal arguments.
    """
    if not created or kwargs.get('raw'):
        return

    try:
        JobQueue().enqueue(WELCOME_QUEUE, {'userId': instance.pk})
    except Exception:
        # Registration already succeeded, the greeting is optional
        logger.exception(
            'Failed to enqueue welcome notification for user %s',
            instance.pk,
        )
