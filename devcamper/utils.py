"""Small helpers shared by models, services and routes."""

import uuid
from datetime import datetime, timezone

from devcamper.exceptions import NotFoundError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(value: str, resource: str = "Resource") -> uuid.UUID:
    """
    Convert a path segment into a UUID primary key.

    A malformed id can never match a row, so it is reported as not-found
    rather than as a validation failure.
    """
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFoundError(resource=resource, resource_id=str(value))
