"""Tests for thumbnail generation."""

from io import BytesIO

import pytest
from PIL import Image, UnidentifiedImageError

from server.apps.files.domain import THUMBNAIL_WIDTHS, FileKind, FileRecord
from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    MissingFieldError,
)
from server.apps.files.logic.thumbnails import (
    generate_thumbnail,
    handle_thumbnail_job,
)


@pytest.fixture
def image_record(owner, store, blob_store, png_bytes):
    """Stored 600x400 image."""
    blob_path = blob_store.write('image-blob', png_bytes)
    record = FileRecord(
        owner_id=owner.user_id,
        name='cat.png',
        kind=FileKind.IMAGE,
        blob_path=blob_path,
    )
    store.insert(record)
    return record


def _payload(record):
    return {'ownerId': record.owner_id, 'fileId': record.id}


def _size_of(data):
    with Image.open(BytesIO(data)) as image:
        return image.size


def test_generate_thumbnail_keeps_aspect_ratio(png_bytes):
    """Test resizing to a width scales the height proportionally."""
    thumbnail = generate_thumbnail(png_bytes, 250)

    assert _size_of(thumbnail) == (250, 167)


def test_generate_thumbnail_keeps_format(png_bytes):
    """Test the variant is encoded like the source."""
    thumbnail = generate_thumbnail(png_bytes, 100)

    with Image.open(BytesIO(thumbnail)) as image:
        assert image.format == 'PNG'


def test_generate_thumbnail_rejects_non_image():
    """Test non-image bytes cannot be resized."""
    with pytest.raises(UnidentifiedImageError):
        generate_thumbnail(b'definitely not an image', 100)


def test_generates_all_widths(store, blob_store, image_record):
    """Test every width gets its sibling blob."""
    results = handle_thumbnail_job(
        _payload(image_record),
        store=store,
        blobs=blob_store,
    )

    assert results == {500: True, 250: True, 100: True}
    for width in THUMBNAIL_WIDTHS:
        variant = blob_store.read(f'image-blob_{width}')
        assert _size_of(variant)[0] == width


def test_failing_width_does_not_block_others(store, blob_store, image_record):
    """Test one corrupt width leaves the other variants intact."""

    def flaky_generator(source, width):
        if width == 250:
            raise OSError('encoder crashed')
        return generate_thumbnail(source, width)

    results = handle_thumbnail_job(
        _payload(image_record),
        store=store,
        blobs=blob_store,
        generator=flaky_generator,
    )

    assert results == {500: True, 250: False, 100: True}
    assert blob_store.exists('image-blob_500')
    assert not blob_store.exists('image-blob_250')
    assert blob_store.exists('image-blob_100')


def test_non_image_source_fails_every_width(owner, store, blob_store):
    """Test undecodable sources fail per width without raising."""
    blob_path = blob_store.write('text-blob', b'plain text')
    record = FileRecord(
        owner_id=owner.user_id,
        name='fake.png',
        kind=FileKind.IMAGE,
        blob_path=blob_path,
    )
    store.insert(record)

    results = handle_thumbnail_job(
        _payload(record),
        store=store,
        blobs=blob_store,
    )

    assert results == {500: False, 250: False, 100: False}


def test_existing_variant_is_kept(store, blob_store, image_record):
    """Test a variant from an earlier run is not rewritten."""
    blob_store.write('image-blob_500', b'previous')
    generated = []

    def recording_generator(source, width):
        generated.append(width)
        return generate_thumbnail(source, width)

    results = handle_thumbnail_job(
        _payload(image_record),
        store=store,
        blobs=blob_store,
        generator=recording_generator,
    )

    assert results == {500: True, 250: True, 100: True}
    assert sorted(generated) == [100, 250]
    assert blob_store.read('image-blob_500') == b'previous'


class RacingBlobStore:
    """Blob store where every variant appears right after the existence check."""

    def __init__(self, source):
        self.blobs = {'image-blob': source}
        self.rolled_back = []

    def exists(self, name):
        return name == 'image-blob'

    def read(self, name):
        return self.blobs[name]

    def write(self, name, data):
        saved_name = f'{name}_dup'
        self.blobs[saved_name] = data
        return saved_name

    def rollback_write(self, name):
        self.rolled_back.append(name)
        self.blobs.pop(name)


def test_concurrent_variant_copy_is_discarded(store, image_record, png_bytes):
    """Test a variant saved under a suffixed name is removed again."""
    racing_blobs = RacingBlobStore(png_bytes)

    results = handle_thumbnail_job(
        _payload(image_record),
        store=store,
        blobs=racing_blobs,
        widths=[100],
    )

    assert results == {100: True}
    assert racing_blobs.rolled_back == ['image-blob_100_dup']
    assert list(racing_blobs.blobs) == ['image-blob']


def test_custom_widths(store, blob_store, image_record):
    """Test the widths to produce can be narrowed."""
    results = handle_thumbnail_job(
        _payload(image_record),
        store=store,
        blobs=blob_store,
        widths=[100],
    )

    assert results == {100: True}
    assert not blob_store.exists('image-blob_500')


@pytest.mark.parametrize(('payload', 'field'), [
    ({'ownerId': 1}, 'fileId'),
    ({'fileId': 1}, 'ownerId'),
    ({}, 'fileId'),
])
def test_missing_payload_field(store, blob_store, payload, field):
    """Test payloads without ids fail the job."""
    with pytest.raises(MissingFieldError, match=f'Missing {field}'):
        handle_thumbnail_job(payload, store=store, blobs=blob_store)


def test_unknown_file(store, blob_store, owner):
    """Test jobs for deleted or unknown files fail."""
    with pytest.raises(FileRecordNotFoundError):
        handle_thumbnail_job(
            {'ownerId': owner.user_id, 'fileId': 999},
            store=store,
            blobs=blob_store,
        )


def test_file_of_other_owner(store, blob_store, stranger, image_record):
    """Test the owner in the payload must match the record."""
    with pytest.raises(FileRecordNotFoundError):
        handle_thumbnail_job(
            {'ownerId': stranger.user_id, 'fileId': image_record.id},
            store=store,
            blobs=blob_store,
        )


def test_folder_has_no_thumbnails(store, blob_store, owner, folder_record):
    """Test folders carry no blob to resize."""
    with pytest.raises(FileRecordNotFoundError):
        handle_thumbnail_job(
            {'ownerId': owner.user_id, 'fileId': folder_record.id},
            store=store,
            blobs=blob_store,
        )
