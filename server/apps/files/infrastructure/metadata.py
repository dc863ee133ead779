"""Metadata helpers for uploaded payloads."""

import base64
import binascii
import mimetypes
from typing import Final

from django.core.exceptions import ValidationError

DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from a filename.

    Uses Python's built-in mimetypes module to guess the type from the
    extension; content is not inspected.

    Args:
        filename: Display name with extension.

    Returns:
        MIME type string (e.g., 'image/png', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return DEFAULT_MIME_TYPE
    return mime_type


def decode_payload(data: str) -> bytes:
    """Decode a base64-encoded upload payload.

    Args:
        data: Base64 text as sent by the client.

    Returns:
        Raw bytes.

    Raises:
        ValidationError: If the payload is not valid base64.
    """
    try:
        return base64.b64decode(data)
    except (binascii.Error, ValueError) as error:
        raise ValidationError('Payload is not valid base64') from error
