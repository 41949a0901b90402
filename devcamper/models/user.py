"""
DevCamper API — User SQLAlchemy Model
======================================

What:  ORM model for the `users` table.
Why:   Users own bootcamps, courses and reviews; their role drives the
       authorization guard.

Password Storage:
    Only the bcrypt hash is stored. The column is deferred with
    `deferred_raiseload`, so ordinary queries never load it and any
    accidental access raises instead of silently issuing a query. Login and
    password changes opt in with `undefer(User.password)`.

Reset Token:
    `reset_password_token` holds the sha256 hex digest of the emailed token,
    never the raw value; `reset_password_expire` bounds its lifetime.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from devcamper.database import Base
from devcamper.models.common import Role, TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.USER.value)
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        deferred=True,
        deferred_raiseload=True,
    )
    reset_password_token: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, index=True
    )
    reset_password_expire: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
