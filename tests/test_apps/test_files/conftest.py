"""Shared fixtures for files app tests."""

import base64
import itertools
from dataclasses import replace
from io import BytesIO

import boto3
import pytest
from django.contrib.auth import get_user_model
from moto import mock_aws
from PIL import Image

from server.apps.files.domain import (
    ROOT_PARENT_ID,
    FileKind,
    FilePatch,
    FileQuery,
    FileRecord,
    Identity,
)
from server.apps.files.infrastructure.storage import LocalBlobStore

User = get_user_model()


class InMemoryMetadataStore:
    """Metadata store keeping records in a list, in insertion order."""

    def __init__(self) -> None:
        self.records: list[FileRecord] = []
        self._ids = itertools.count(1)

    def insert(self, record: FileRecord) -> int:
        record.id = next(self._ids)
        self.records.append(replace(record))
        return record.id

    def find_one(self, query: FileQuery) -> FileRecord | None:
        matches = self.find_many(query, limit=1)
        return matches[0] if matches else None

    def find_many(
        self,
        query: FileQuery,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FileRecord]:
        matches = [
            replace(record)
            for record in self.records
            if _matches(record, query)
        ]
        if limit is None:
            return matches[skip:]
        return matches[skip:skip + limit]

    def update_one(
        self,
        query: FileQuery,
        patch: FilePatch,
    ) -> FileRecord | None:
        for record in self.records:
            if _matches(record, query):
                record.is_public = patch.is_public
                return replace(record)
        return None

    def count(self, query: FileQuery) -> int:
        return len(self.find_many(query))


def _matches(record: FileRecord, query: FileQuery) -> bool:
    constraints = (
        (query.file_id, record.id),
        (query.owner_id, record.owner_id),
        (query.parent_id, record.parent_id),
        (query.kind, record.kind),
    )
    return all(
        expected is None or expected == actual
        for expected, actual in constraints
    )


class RecordingQueue:
    """Job producer remembering what was enqueued."""

    def __init__(self) -> None:
        self.jobs: list[tuple[str, dict]] = []

    def enqueue(self, queue_name: str, payload: dict) -> None:
        self.jobs.append((queue_name, dict(payload)))


class BrokenQueue:
    """Job producer whose backend is down."""

    def enqueue(self, queue_name: str, payload: dict) -> None:
        raise ConnectionError('queue unavailable')


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def owner():
    """Identity owning the records under test."""
    return Identity(user_id=1, email='owner@example.com')


@pytest.fixture
def stranger():
    """Identity owning nothing."""
    return Identity(user_id=2, email='stranger@example.com')


@pytest.fixture
def store():
    """Empty in-memory metadata store."""
    return InMemoryMetadataStore()


@pytest.fixture
def queue():
    """Job producer recording enqueued jobs."""
    return RecordingQueue()


@pytest.fixture
def blob_store(tmp_path):
    """Local blob store rooted in a temporary directory.

    Returns:
        LocalBlobStore writing under ``tmp_path / 'files'``.
    """
    return LocalBlobStore(location=tmp_path / 'files')


@pytest.fixture
def png_bytes():
    """A 600x400 PNG image.

    Returns:
        Encoded PNG bytes.
    """
    buffer = BytesIO()
    Image.new('RGB', (600, 400), color=(200, 30, 30)).save(buffer, 'PNG')
    return buffer.getvalue()


@pytest.fixture
def png_base64(png_bytes):
    """The PNG fixture as an upload payload."""
    return base64.b64encode(png_bytes).decode()


@pytest.fixture
def folder_record(store, owner):
    """Folder at the root of the owner's tree."""
    record = FileRecord(
        owner_id=owner.user_id,
        name='Photos',
        kind=FileKind.FOLDER,
        parent_id=ROOT_PARENT_ID,
    )
    store.insert(record)
    return record


@pytest.fixture
def mock_s3():
    """Mock S3 service with files-manager bucket.

    Yields:
        boto3 S3 resource with files-manager bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='files-manager')

        yield conn


@pytest.fixture
def broken_queue():
    """Job producer that fails on every enqueue."""
    return BrokenQueue()


@pytest.fixture
def local_storage(settings, tmp_path):
    """Point the default storage at a temporary directory.

    Returns:
        Directory holding the blobs.
    """
    location = tmp_path / 'content'
    settings.STORAGES = {
        **settings.STORAGES,
        'default': {
            'BACKEND': 'server.apps.files.infrastructure.storage.LocalBlobStore',
            'OPTIONS': {'location': str(location)},
        },
    }
    return location
