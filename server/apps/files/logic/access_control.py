"""Access decisions for file records.

Reads of private records by anyone but the owner are reported exactly
like reads of records that do not exist.
"""

import enum
import logging

from server.apps.files.domain import FileRecord, Identity
from server.apps.files.exceptions import NotFoundError, UnauthenticatedError
from server.apps.tokens.logic.session_resolver import (
    SessionResolver,
    TokenSessionResolver,
)

logger = logging.getLogger(__name__)


class AccessDecision(enum.Enum):
    """Outcome of an access check."""

    ALLOWED = 'allowed'
    DENIED = 'denied'


def resolve_identity(
    token: str | None,
    resolver: SessionResolver | None = None,
) -> Identity | None:
    """Resolve a raw request token to an identity.

    Args:
        token: Token sent by the client; None or empty for anonymous.
        resolver: Session resolver; token table when omitted.

    Returns:
        Identity, or None for anonymous callers and unknown tokens.
    """
    if not token:
        return None
    resolver = resolver or TokenSessionResolver()
    return resolver.resolve(token)


def require_identity(identity: Identity | None) -> Identity:
    """Reject anonymous callers.

    Args:
        identity: Resolved identity or None.

    Returns:
        The same identity.

    Raises:
        UnauthenticatedError: If the caller is anonymous.
    """
    if identity is None:
        raise UnauthenticatedError()
    return identity


def authorize(identity: Identity | None, record: FileRecord) -> AccessDecision:
    """Decide whether the caller may read the record.

    Args:
        identity: Caller, or None for anonymous.
        record: Record being read.

    Returns:
        ALLOWED for public records and for the owner, DENIED otherwise.
    """
    if record.is_public:
        return AccessDecision.ALLOWED
    if identity is not None and identity.user_id == record.owner_id:
        return AccessDecision.ALLOWED
    return AccessDecision.DENIED


def ensure_readable(identity: Identity | None, record: FileRecord) -> None:
    """Raise unless the caller may read the record.

    Args:
        identity: Caller, or None for anonymous.
        record: Record being read.

    Raises:
        NotFoundError: If access is denied.
    """
    if authorize(identity, record) is AccessDecision.DENIED:
        logger.debug('Read of private file %s denied', record.id)
        raise NotFoundError()
