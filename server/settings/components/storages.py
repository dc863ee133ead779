"""Django storage configuration for file blobs.

Blobs land either in a local content directory (``FOLDER_PATH``) or in an
S3-compatible bucket (MinIO, Cloudflare R2, AWS) through django-storages.
The ``default`` storage is the blob store used by the files app.
"""

from typing import Any, Final

from server.settings.components import config

# Root of the local content directory, created on first write
FOLDER_PATH = config('FOLDER_PATH', default='/tmp/files_manager')  # noqa: S108

BLOB_STORAGE_BACKEND = config('BLOB_STORAGE_BACKEND', default='local')

_BLOB_BACKENDS: Final[dict[str, dict[str, Any]]] = {
    'local': {
        'BACKEND': 'server.apps.files.infrastructure.storage.LocalBlobStore',
        'OPTIONS': {
            'location': FOLDER_PATH,
        },
    },
    's3': {
        'BACKEND': 'server.apps.files.infrastructure.storage.S3BlobStore',
        'OPTIONS': {
            'bucket_name': config(
                'AWS_STORAGE_BUCKET_NAME',
                default='files-manager',
            ),
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='auto',
            ),
            'file_overwrite': False,  # Blob names are never reused
            'default_acl': None,  # Inherit bucket ACL
        },
    },
}

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': _BLOB_BACKENDS[BLOB_STORAGE_BACKEND],
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
