"""Column mixins and enumerations shared by the ORM models."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from devcamper.utils import utcnow


class Role(str, enum.Enum):
    """Fixed role enumeration; stored as its string value."""

    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"


class TimestampMixin:
    """
    UUID primary key plus createdAt / updatedAt columns.

    Why UUID: Non-sequential ids can't be enumerated, and the generic `Uuid`
    type maps to native UUID on PostgreSQL and CHAR(32) on SQLite.
    Why Python-side defaults: the values are known right after flush, so a
    freshly created row can be serialized without a refresh round-trip.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
