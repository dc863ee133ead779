"""Django admin configuration for tokens app."""

from django.contrib import admin

from server.apps.tokens.models import AccessToken


@admin.register(AccessToken)
class AccessTokenAdmin(admin.ModelAdmin):
    """Admin interface for issued access tokens."""

    list_display = ['key_prefix', 'user', 'created_at']
    list_filter = ['created_at']
    search_fields = ['user__username', 'user__email']
    readonly_fields = ['key', 'user', 'created_at']

    def key_prefix(self, obj: AccessToken) -> str:
        """Show only the first characters of the key."""
        return f'{obj.key[:8]}…'
    key_prefix.short_description = 'Key'  # type: ignore[attr-defined]

    def has_add_permission(self, request: object) -> bool:
        """Tokens are issued at sign-in only."""
        return False
