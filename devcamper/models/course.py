"""
DevCamper API — Course SQLAlchemy Model
========================================

Every insert, tuition change and delete of a course is followed by a
recompute of the parent bootcamp's `average_cost`
(see services/aggregate_service.py).
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.database import Base
from devcamper.models.common import TimestampMixin

if TYPE_CHECKING:
    from devcamper.models.bootcamp import Bootcamp

SKILL_LEVELS = ("beginner", "intermediate", "advanced")


class Course(TimestampMixin, Base):
    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    weeks: Mapped[str] = mapped_column(String(20), nullable=False)
    tuition: Mapped[int] = mapped_column(Integer, nullable=False)
    minimum_skill: Mapped[str] = mapped_column(String(20), nullable=False)
    scholarship_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    bootcamp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="courses")

    __table_args__ = (
        CheckConstraint("tuition >= 0", name="ck_courses_tuition_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title='{self.title}', tuition={self.tuition})>"
