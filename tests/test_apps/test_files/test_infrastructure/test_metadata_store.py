"""Tests for the Django-backed metadata store."""

import pytest

from server.apps.files.domain import (
    ROOT_PARENT_ID,
    FileKind,
    FilePatch,
    FileQuery,
    FileRecord,
)
from server.apps.files.infrastructure.metadata_store import DjangoMetadataStore
from server.apps.files.models import File

pytestmark = pytest.mark.django_db


@pytest.fixture
def django_store():
    """Metadata store over the test database."""
    return DjangoMetadataStore()


def _insert(django_store, owner, name, kind=FileKind.FILE, parent_id=0):
    record = FileRecord(
        owner_id=owner.pk,
        name=name,
        kind=kind,
        parent_id=parent_id,
        blob_path=None if kind == FileKind.FOLDER else f'blob-{name}',
    )
    django_store.insert(record)
    return record


def test_insert_assigns_id(django_store, user):
    """Test insert creates a row and fills in the record id."""
    record = _insert(django_store, user, 'a.txt')

    file_instance = File.objects.get(pk=record.id)
    assert file_instance.user == user
    assert file_instance.name == 'a.txt'
    assert file_instance.kind == 'file'
    assert file_instance.parent is None
    assert file_instance.blob_path == 'blob-a.txt'


def test_insert_folder_has_empty_blob_path(django_store, user):
    """Test folders are stored without a blob path."""
    record = _insert(django_store, user, 'Photos', kind=FileKind.FOLDER)

    assert File.objects.get(pk=record.id).blob_path == ''
    assert django_store.find_one(FileQuery(file_id=record.id)).blob_path is None


def test_find_one_round_trips_fields(django_store, user):
    """Test stored records come back as equal plain records."""
    folder = _insert(django_store, user, 'Photos', kind=FileKind.FOLDER)
    record = _insert(django_store, user, 'cat.png', FileKind.IMAGE, folder.id)

    found = django_store.find_one(FileQuery(file_id=record.id))

    assert found == record
    assert found.kind is FileKind.IMAGE


def test_find_one_missing(django_store, user):
    """Test lookups without a match."""
    assert django_store.find_one(FileQuery(file_id=12345)) is None


def test_find_one_scoped_by_owner(django_store, user, other_user):
    """Test owner constraints exclude records of other users."""
    record = _insert(django_store, user, 'a.txt')

    query = FileQuery(file_id=record.id, owner_id=other_user.pk)

    assert django_store.find_one(query) is None


def test_find_many_root_and_folder(django_store, user):
    """Test parent constraints separate root from folder contents."""
    folder = _insert(django_store, user, 'Photos', kind=FileKind.FOLDER)
    child = _insert(django_store, user, 'cat.png', parent_id=folder.id)

    root = django_store.find_many(
        FileQuery(owner_id=user.pk, parent_id=ROOT_PARENT_ID),
    )
    inside = django_store.find_many(
        FileQuery(owner_id=user.pk, parent_id=folder.id),
    )

    assert [record.id for record in root] == [folder.id]
    assert [record.id for record in inside] == [child.id]


def test_find_many_window(django_store, user):
    """Test skip and limit select a window in insertion order."""
    records = [_insert(django_store, user, f'{index}.txt') for index in range(5)]
    query = FileQuery(owner_id=user.pk)

    window = django_store.find_many(query, skip=1, limit=2)
    tail = django_store.find_many(query, skip=3)

    assert [record.id for record in window] == [records[1].id, records[2].id]
    assert [record.id for record in tail] == [records[3].id, records[4].id]


def test_find_many_by_kind(django_store, user):
    """Test kind constraints."""
    _insert(django_store, user, 'a.txt')
    image = _insert(django_store, user, 'b.png', kind=FileKind.IMAGE)

    found = django_store.find_many(FileQuery(kind=FileKind.IMAGE))

    assert [record.id for record in found] == [image.id]


def test_update_one(django_store, user):
    """Test patching the public flag."""
    record = _insert(django_store, user, 'a.txt')

    updated = django_store.update_one(
        FileQuery(file_id=record.id, owner_id=user.pk),
        FilePatch(is_public=True),
    )

    assert updated.is_public is True
    assert File.objects.get(pk=record.id).is_public is True


def test_update_one_without_match(django_store, user, other_user):
    """Test patches never touch records outside the query."""
    record = _insert(django_store, user, 'a.txt')

    updated = django_store.update_one(
        FileQuery(file_id=record.id, owner_id=other_user.pk),
        FilePatch(is_public=True),
    )

    assert updated is None
    assert File.objects.get(pk=record.id).is_public is False


def test_count(django_store, user, other_user):
    """Test counting matches."""
    _insert(django_store, user, 'a.txt')
    _insert(django_store, user, 'b.txt')
    _insert(django_store, other_user, 'c.txt')

    assert django_store.count(FileQuery(owner_id=user.pk)) == 2
    assert django_store.count(FileQuery()) == 3
