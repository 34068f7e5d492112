"""
Store error classification.

Maps database exceptions onto a small set of categories so callers can
show a tailored message instead of the raw driver text.
"""

from dataclasses import dataclass

from django.db import IntegrityError, InterfaceError, OperationalError


CONNECTION = 'connection'
AUTH = 'auth'
PERMISSION = 'permission'
CONSTRAINT = 'constraint'
UNKNOWN = 'unknown'

MESSAGES = {
    CONNECTION: 'The database is unreachable. Check the connection and try again.',
    AUTH: 'The database rejected the credentials.',
    PERMISSION: 'You do not have permission to change this data.',
    CONSTRAINT: 'The change conflicts with existing data (duplicate or referenced record).',
    UNKNOWN: 'The operation failed. Please try again.',
}

# Checked in order; the first category whose keyword appears wins.
_KEYWORDS = (
    (AUTH, ('password authentication failed', 'authentication failed', 'jwt', 'not authenticated')),
    (PERMISSION, ('permission denied', 'insufficient privilege', 'row-level security', 'not allowed')),
    (CONSTRAINT, ('unique', 'duplicate key', 'violates', 'foreign key', 'constraint', 'not null')),
    (CONNECTION, ('could not connect', 'connection', 'timeout', 'timed out', 'network', 'server closed')),
)


@dataclass(frozen=True)
class StoreError:
    category: str
    message: str
    detail: str = ''


def classify_store_error(exc: BaseException) -> StoreError:
    """Classify a store exception by type, then by message content."""
    text = str(exc).lower()

    if isinstance(exc, IntegrityError):
        category = CONSTRAINT
    elif isinstance(exc, InterfaceError):
        category = CONNECTION
    else:
        category = next(
            (name for name, words in _KEYWORDS if any(word in text for word in words)),
            UNKNOWN,
        )
        if category == UNKNOWN and isinstance(exc, OperationalError):
            category = CONNECTION

    return StoreError(category=category, message=MESSAGES[category], detail=str(exc))


def is_unique_violation(exc: BaseException, field: str) -> bool:
    """True when an IntegrityError mentions a uniqueness failure on `field`."""
    if not isinstance(exc, IntegrityError):
        return False
    text = str(exc).lower()
    return field.lower() in text and ('unique' in text or 'duplicate' in text)
