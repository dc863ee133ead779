"""Welcome notifications for newly registered users."""

import logging
from collections.abc import Mapping
from typing import Any, Final, Protocol, final

from django.contrib.auth import get_user_model

from server.apps.files.domain import coerce_id
from server.apps.files.exceptions import MissingFieldError, UserNotFoundError

User = get_user_model()
logger = logging.getLogger(__name__)

# Queue consumed by the welcome notifier
WELCOME_QUEUE: Final = 'userQueue'


class Notifier(Protocol):
    """Delivers user-facing notifications."""

    def welcome(self, email: str) -> None:
        """Greet a newly registered user."""


@final
class LoggingNotifier:
    """Notifier that writes greetings to the log."""

    def welcome(self, email: str) -> None:
        """Log a welcome message.

        Args:
            email: Address of the new user.
        """
        logger.info('Welcome %s!', email)


def handle_welcome_job(
    payload: Mapping[str, Any],
    *,
    notifier: Notifier | None = None,
) -> None:
    """Send the welcome notification for a new user.

    Args:
        payload: ``{userId}`` job payload.
        notifier: Delivery channel; log output when omitted.

    Raises:
        MissingFieldError: If userId is absent.
        UserNotFoundError: If the user does not exist.
    """
    raw_user_id = payload.get('userId')
    if not raw_user_id:
        raise MissingFieldError('userId')

    user_id = coerce_id(raw_user_id)
    user = None
    if user_id is not None:
        user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise UserNotFoundError(raw_user_id)

    notifier = notifier or LoggingNotifier()
    notifier.welcome(user.email)
