"""Exceptions for files app.

Request-side errors carry the status class they surface as. Denied
access and absent records share ``NotFoundError`` on purpose: callers
must not be able to tell a private record from a missing one.
"""

from typing import ClassVar


class FilesError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: ClassVar[int] = 400
    default_message: ClassVar[str] = 'Bad request'

    def __init__(self, message: str | None = None) -> None:
        """Initialize the error with a client-facing message.

        Args:
            message: Message override; class default when omitted.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(FilesError):
    """Raised when the caller has no valid session."""

    status_code = 401
    default_message = 'Unauthorized'


class InvalidRequestError(FilesError):
    """Raised on malformed input (missing name, type or data)."""


class ParentNotFoundError(InvalidRequestError):
    """Raised when the requested parent record does not exist."""

    default_message = 'Parent not found'


class InvalidParentError(InvalidRequestError):
    """Raised when the requested parent record is not a folder."""

    default_message = 'Parent is not a folder'


class NotFoundError(FilesError):
    """Raised for absent records, denied access and absent blobs."""

    status_code = 404
    default_message = 'Not found'


class BlobNotFoundError(Exception):
    """Raised by blob stores when a blob path does not exist."""

    def __init__(self, name: str) -> None:
        """Initialize BlobNotFoundError.

        Args:
            name: Blob path that was requested.
        """
        self.name = name
        super().__init__(f'Blob not found: {name}')


class JobError(Exception):
    """Base class for failures that mark a queued job as failed."""


class MissingFieldError(JobError):
    """Raised when a job payload lacks a required field."""

    def __init__(self, field: str) -> None:
        """Initialize MissingFieldError.

        Args:
            field: Name of the missing payload field.
        """
        self.field = field
        super().__init__(f'Missing {field}')


class FileRecordNotFoundError(JobError):
    """Raised when a job references a file that does not exist."""

    def __init__(self, file_id: object) -> None:
        """Initialize FileRecordNotFoundError.

        Args:
            file_id: File id taken from the job payload.
        """
        self.file_id = file_id
        super().__init__(f'File not found: {file_id}')


class UserNotFoundError(JobError):
    """Raised when a job references a user that does not exist."""

    def __init__(self, user_id: object) -> None:
        """Initialize UserNotFoundError.

        Args:
            user_id: User id taken from the job payload.
        """
        self.user_id = user_id
        super().__init__(f'User not found: {user_id}')
