"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.models import File


@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    """Admin interface for File model."""

    list_display = [
        'name',
        'user',
        'kind',
        'is_public',
        'parent_display',
        'uploaded_at',
    ]

    list_filter = [
        'kind',
        'is_public',
        'uploaded_at',
    ]

    search_fields = [
        'name',
        'blob_path',
    ]

    # Kind and blob location never change after upload
    readonly_fields = [
        'kind',
        'blob_path',
        'uploaded_at',
        'modified_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'user', 'kind', 'parent'),
        }),
        ('Visibility', {
            'fields': ('is_public',),
        }),
        ('Storage', {
            'fields': ('blob_path',),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at', 'modified_at'),
        }),
    )

    def parent_display(self, obj: File) -> str:
        """Display parent folder name, or the root marker.

        Args:
            obj: File instance.

        Returns:
            Parent folder name, or '/' for root records.
        """
        if obj.parent_id is None:
            return '/'
        return f'{obj.parent.name} (#{obj.parent_id})'
    parent_display.short_description = 'Parent'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'parent')
