"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Blob storage backends (local directory, S3/MinIO/R2)
- Metadata store over the Django ORM
- Payload decoding and MIME type detection

Keep infrastructure concerns separate from business logic.
"""
