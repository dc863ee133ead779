"""Plain data types shared by the files logic layer.

These types travel between the logic functions and their collaborators
(metadata store, blob store, job queue) so that each collaborator can be
swapped for an in-memory fake without touching Django models.
"""

from dataclasses import dataclass
from typing import Any, Final

from django.db import models

# parentId value meaning "no parent folder"
ROOT_PARENT_ID: Final = 0

# Widths (px) of the derived image variants, in generation order
THUMBNAIL_WIDTHS: Final = (500, 250, 100)


class FileKind(models.TextChoices):
    """Kind of a stored record."""

    FOLDER = 'folder', 'Folder'
    FILE = 'file', 'File'
    IMAGE = 'image', 'Image'


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller resolved from an access token."""

    user_id: int
    email: str = ''


@dataclass(slots=True)
class FileRecord:
    """Metadata of a folder, file or image owned by a single user.

    ``blob_path`` is only set for non-folder kinds and is never part of
    the response shape.
    """

    owner_id: int
    name: str
    kind: FileKind
    is_public: bool = False
    parent_id: int = ROOT_PARENT_ID
    blob_path: str | None = None
    id: int | None = None  # noqa: WPS125

    @property
    def is_folder(self) -> bool:
        """Folders carry no byte content."""
        return self.kind == FileKind.FOLDER

    def variant_path(self, width: int) -> str:
        """Blob path of the thumbnail variant for ``width``.

        Args:
            width: Variant width in pixels.

        Returns:
            Path of the sibling variant blob (``<blob_path>_<width>``).

        Raises:
            ValueError: If the record has no blob.
        """
        if self.blob_path is None:
            raise ValueError(f'Record {self.id} has no blob')
        return f'{self.blob_path}_{width}'

    def to_response(self) -> dict[str, Any]:
        """Render the record in the external response shape."""
        return {
            'id': self.id,
            'userId': self.owner_id,
            'name': self.name,
            'type': self.kind.value,
            'isPublic': self.is_public,
            'parentId': self.parent_id,
        }


@dataclass(frozen=True, slots=True)
class FileQuery:
    """Typed filter for metadata store lookups.

    ``None`` leaves a field unconstrained. ``parent_id=ROOT_PARENT_ID``
    matches records placed at the root.
    """

    file_id: int | None = None
    owner_id: int | None = None
    parent_id: int | None = None
    kind: FileKind | None = None


@dataclass(frozen=True, slots=True)
class FilePatch:
    """Mutable fields of a stored record."""

    is_public: bool


@dataclass(frozen=True, slots=True)
class UploadRequest:
    """Upload request as received from the transport layer."""

    name: str | None
    kind: str | None
    parent_id: int | str | None = ROOT_PARENT_ID
    is_public: bool = False
    data: str | None = None


@dataclass(frozen=True, slots=True)
class FileContent:
    """Bytes of a blob together with its inferred content type."""

    data: bytes
    content_type: str


def coerce_id(raw_id: object) -> int | None:
    """Convert an identifier coming from the outside world to an int.

    Args:
        raw_id: Identifier as received (int or numeric string).

    Returns:
        Integer id, or None if the value is not a valid identifier.
    """
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return raw_id
    if isinstance(raw_id, str) and _is_ascii_digits(raw_id.strip()):
        return int(raw_id)
    return None


def _is_ascii_digits(text: str) -> bool:
    # str.isdigit also accepts superscripts and other digits int() rejects
    return text.isascii() and text.isdigit()
