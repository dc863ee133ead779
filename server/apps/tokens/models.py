"""Database models for access tokens."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

_TOKEN_KEY_MAX_LENGTH: Final = 64


@final
class AccessToken(models.Model):
    """Opaque token identifying a signed-in user.

    Clients send the key with every request; the key alone is enough
    to resolve the user, so it is only ever logged truncated.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='access_tokens',
        db_index=True,
    )

    key = models.CharField(
        max_length=_TOKEN_KEY_MAX_LENGTH,
        unique=True,
        help_text='Opaque token sent by clients',
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text='Issue time; tokens expire after AUTH_TOKEN_TTL',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'Access Token'  # type: ignore[mutable-override]
        verbose_name_plural = 'Access Tokens'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username} ({self.key[:8]})'
