"""
DevCamper API — Review SQLAlchemy Model
========================================

One review per (bootcamp, user) pair, enforced by a unique constraint; a
second insert raises IntegrityError, which the global handler reports as a
409 conflict. Inserts, rating changes and deletes trigger a recompute of the
bootcamp's `average_rating`.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.database import Base
from devcamper.models.common import TimestampMixin

if TYPE_CHECKING:
    from devcamper.models.bootcamp import Bootcamp


class Review(TimestampMixin, Base):
    __tablename__ = "reviews"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    text: Mapped[str] = mapped_column(String(500), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    bootcamp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="reviews")

    __table_args__ = (
        UniqueConstraint("bootcamp_id", "user_id", name="uq_reviews_bootcamp_user"),
        CheckConstraint("rating >= 1 AND rating <= 10", name="ck_reviews_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, rating={self.rating})>"
