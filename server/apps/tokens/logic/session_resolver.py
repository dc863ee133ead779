"""Access token issuing and resolution.

Tokens map to a user for ``AUTH_TOKEN_TTL`` seconds after issue.
"""

import logging
import secrets
from datetime import timedelta
from typing import TYPE_CHECKING, Final, Protocol, final

from django.conf import settings
from django.utils import timezone

from server.apps.files.domain import Identity
from server.apps.tokens.models import AccessToken

if TYPE_CHECKING:
    from django.contrib.auth.models import User

logger = logging.getLogger(__name__)

# Token length in bytes (generates 64 hex chars)
_TOKEN_BYTES: Final = 32


class SessionResolver(Protocol):
    """Maps an opaque token to an identity."""

    def resolve(self, token: str) -> Identity | None:
        """Return the identity behind ``token``, or None."""


def get_token_ttl() -> int:
    """Get token lifetime in seconds.

    Returns:
        Lifetime from settings or default of 86400 (24 h).
    """
    return getattr(settings, 'AUTH_TOKEN_TTL', 86400)


def issue_token(user: 'User') -> str:
    """Issue a new access token for the user.

    Args:
        user: Django user the token identifies.

    Returns:
        Token key to hand to the client.
    """
    key = secrets.token_hex(_TOKEN_BYTES)
    AccessToken.objects.create(user=user, key=key)
    logger.info('Access token issued for user %s: %s', user.username, key[:8])
    return key


def revoke_token(key: str) -> bool:
    """Revoke an access token.

    Args:
        key: Token key to revoke.

    Returns:
        True if the token existed and was deleted, False otherwise.
    """
    deleted, _ = AccessToken.objects.filter(key=key).delete()
    if deleted:
        logger.info('Access token revoked: %s', key[:8])
    return deleted > 0


@final
class TokenSessionResolver:
    """Session resolver backed by the ``AccessToken`` table."""

    def resolve(self, token: str) -> Identity | None:
        """Resolve a token key to the identity of its user.

        Expired tokens and tokens of inactive users do not resolve.

        Args:
            token: Token key sent by the client.

        Returns:
            Identity if the token is valid, None otherwise.
        """
        if not token:
            return None

        access_token = (
            AccessToken.objects.select_related('user')
            .filter(key=token)
            .first()
        )
        if access_token is None:
            return None

        cutoff = timezone.now() - timedelta(seconds=get_token_ttl())
        if access_token.created_at < cutoff:
            logger.debug('Access token expired: %s', token[:8])
            return None

        user = access_token.user
        if not user.is_active:
            logger.warning('Inactive user presented a token: %s', user.username)
            return None

        return Identity(user_id=user.pk, email=user.email)
