"""Business logic layer for files app.

This package contains all business logic for file operations:
- Folder creation and file upload (ingestion)
- Access decisions, listing, visibility and content retrieval
- Queue consumers for thumbnails and welcome notifications

Collaborators (metadata store, blob store, job queue) are passed in as
arguments and default to the Django-backed implementations.
"""
