"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.contrib.auth import get_user_model
from django.db import models

from server.apps.files.domain import FileKind

User = get_user_model()

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_KIND_MAX_LENGTH: Final = 16
_BLOB_PATH_MAX_LENGTH: Final = 255


@final
class File(models.Model):
    """Folder, file or image owned by a user.

    Folders and files share one table and differ only by ``kind``.
    Non-folder records point at their bytes through ``blob_path``, an
    opaque name inside the blob storage. Thumbnail variants of images
    are sibling blobs (``<blob_path>_<width>``) without rows of their own.

    The tree is one level deep in practice: ``parent`` is either empty
    (root) or a folder owned by anyone, validated at creation time only.
    """

    # Owner relationship
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Display name',
    )

    kind = models.CharField(
        max_length=_KIND_MAX_LENGTH,
        choices=FileKind.choices,
        help_text='folder, file or image; immutable',
    )

    is_public = models.BooleanField(
        default=False,
        help_text='Readable by anyone when set',
    )

    # Empty parent means the record sits at the root
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        related_name='children',
        null=True,
        blank=True,
    )

    blob_path = models.CharField(
        max_length=_BLOB_PATH_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Opaque blob storage name; empty for folders',
    )

    # Timestamps
    uploaded_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        # Store-native order: insertion order
        ordering: ClassVar[list[str]] = ['id']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize directory listing queries
            models.Index(
                fields=['user', 'parent'],
                name='files_user_parent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name} ({self.kind})'

    @property
    def is_folder(self) -> bool:
        """Whether this record is a folder."""
        return self.kind == FileKind.FOLDER
