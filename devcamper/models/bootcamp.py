"""
DevCamper API — Bootcamp SQLAlchemy Model
==========================================

What:  ORM model for the `bootcamps` table.
Why:   The top-level resource; courses and reviews hang off it.

Table Design Rationale:
    - location: the geocoded point and address parts are flattened into plain
      columns (longitude, latitude, formatted_address, street, city, state,
      zipcode, country). The `location` property reassembles them into the
      GeoJSON-like object the API returns, and list filters address them with
      dotted names such as `location.state`.
    - careers: JSON list of values from CAREERS.
    - average_cost / average_rating: derived columns, written only by the
      aggregate recompute in services/aggregate_service.py.
    - One bootcamp per non-admin user is a business rule checked at creation,
      not a unique index (admins may own several).
"""

import uuid
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.database import Base
from devcamper.models.common import TimestampMixin

if TYPE_CHECKING:
    from devcamper.models.course import Course
    from devcamper.models.review import Review

CAREERS = (
    "Web Development",
    "Mobile Development",
    "UI/UX",
    "Data Science",
    "Business",
    "Other",
)


class Bootcamp(TimestampMixin, Base):
    __tablename__ = "bootcamps"

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ── Geocoded location ─────────────────────────────────────────────────
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    formatted_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    street: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    zipcode: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    careers: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    average_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    average_cost: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    photo: Mapped[str] = mapped_column(String(255), nullable=False, default="no-photo.jpg")
    housing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_assistance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_guarantee: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accept_gi: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # passive_deletes: children are removed explicitly by the service (and by
    # ON DELETE CASCADE), so deleting a bootcamp never lazy-loads them.
    courses: Mapped[List["Course"]] = relationship(
        back_populates="bootcamp",
        passive_deletes=True,
        order_by="Course.created_at",
    )
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="bootcamp",
        passive_deletes=True,
    )

    @property
    def location(self) -> Optional[Dict[str, Any]]:
        if self.longitude is None or self.latitude is None:
            return None
        return {
            "type": "Point",
            "coordinates": [self.longitude, self.latitude],
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }

    def __repr__(self) -> str:
        return f"<Bootcamp(id={self.id}, name='{self.name}')>"
