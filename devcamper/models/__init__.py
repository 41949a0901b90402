"""
DevCamper API — ORM Models
===========================

Importing this package registers every table with `Base.metadata`
(Alembic and `create_schema()` rely on that).

Relationships:
    User 1──* Bootcamp 1──* Course
                       1──* Review
    Course.user / Review.user reference the creating user.
"""

from devcamper.models.common import Role, TimestampMixin
from devcamper.models.user import User
from devcamper.models.bootcamp import Bootcamp, CAREERS
from devcamper.models.course import Course, SKILL_LEVELS
from devcamper.models.review import Review

__all__ = [
    "Bootcamp",
    "CAREERS",
    "Course",
    "Review",
    "Role",
    "SKILL_LEVELS",
    "TimestampMixin",
    "User",
]
