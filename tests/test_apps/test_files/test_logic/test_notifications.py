"""Tests for welcome notifications."""

import logging

import pytest

from server.apps.files.exceptions import MissingFieldError, UserNotFoundError
from server.apps.files.logic.notifications import (
    LoggingNotifier,
    handle_welcome_job,
)


class RecordingNotifier:
    """Notifier remembering who was greeted."""

    def __init__(self):
        self.greeted = []

    def welcome(self, email):
        self.greeted.append(email)


@pytest.mark.django_db
def test_welcome_existing_user(user):
    """Test the user is greeted by email."""
    notifier = RecordingNotifier()

    handle_welcome_job({'userId': user.pk}, notifier=notifier)

    assert notifier.greeted == ['test@example.com']


@pytest.mark.django_db
def test_welcome_user_id_as_string(user):
    """Test user ids arriving as strings."""
    notifier = RecordingNotifier()

    handle_welcome_job({'userId': str(user.pk)}, notifier=notifier)

    assert notifier.greeted == [user.email]


@pytest.mark.django_db
def test_welcome_logs_by_default(user, caplog):
    """Test the default notifier writes the greeting to the log."""
    with caplog.at_level(logging.INFO):
        handle_welcome_job({'userId': user.pk})

    assert 'Welcome test@example.com!' in caplog.text


@pytest.mark.parametrize('payload', [{}, {'userId': None}, {'userId': ''}])
def test_welcome_missing_user_id(payload):
    """Test payloads without a user id fail the job."""
    with pytest.raises(MissingFieldError, match='Missing userId'):
        handle_welcome_job(payload, notifier=RecordingNotifier())


@pytest.mark.django_db
@pytest.mark.parametrize('user_id', [999, 'abc'])
def test_welcome_unknown_user(user_id):
    """Test jobs for unknown users fail."""
    notifier = RecordingNotifier()

    with pytest.raises(UserNotFoundError):
        handle_welcome_job({'userId': user_id}, notifier=notifier)

    assert notifier.greeted == []


def test_logging_notifier(caplog):
    """Test the logging notifier output."""
    with caplog.at_level(logging.INFO):
        LoggingNotifier().welcome('someone@example.com')

    assert 'Welcome someone@example.com!' in caplog.text
