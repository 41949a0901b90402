"""
DevCamper API — Course Service
===============================

Course CRUD. Every write ends with a recompute of the parent bootcamp's
`average_cost`; ownership of the course itself is enforced by the guard
dependencies on the route, ownership of the parent bootcamp on create is
checked here.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from devcamper.exceptions import ForbiddenError, NotFoundError
from devcamper.models import Bootcamp, Course, User
from devcamper.schemas.course import CourseCreate, CourseUpdate
from devcamper.services.aggregate_service import recompute_average_cost
from devcamper.utils import parse_id

logger = logging.getLogger(__name__)


def _not_found(course_id: str) -> NotFoundError:
    return NotFoundError(
        resource="Course",
        resource_id=course_id,
        message=f"No course with the id of {course_id}",
    )


class CourseService:
    async def list_for_bootcamp(self, db: AsyncSession, bootcamp_id: str) -> List[Course]:
        result = await db.scalars(
            select(Course)
            .where(Course.bootcamp_id == parse_id(bootcamp_id, "Bootcamp"))
            .order_by(Course.created_at)
        )
        return list(result.all())

    async def get(self, db: AsyncSession, course_id: str, with_bootcamp: bool = False) -> Course:
        stmt = select(Course).where(Course.id == parse_id(course_id, "Course"))
        if with_bootcamp:
            stmt = stmt.options(selectinload(Course.bootcamp))
        course = await db.scalar(stmt)
        if course is None:
            raise _not_found(course_id)
        return course

    async def create(
        self,
        db: AsyncSession,
        user: User,
        bootcamp_id: str,
        data: CourseCreate,
    ) -> Course:
        bootcamp = await db.get(Bootcamp, parse_id(bootcamp_id, "Bootcamp"))
        if bootcamp is None:
            raise NotFoundError(
                resource="Bootcamp",
                resource_id=bootcamp_id,
                message=f"No bootcamp with the id of {bootcamp_id}",
            )
        if bootcamp.user_id != user.id and not user.is_admin:
            raise ForbiddenError(
                message=f"User {user.id} is not authorized to add a course to bootcamp {bootcamp.id}"
            )

        course = Course(**data.model_dump(), bootcamp_id=bootcamp.id, user_id=user.id)
        db.add(course)
        await db.flush()
        await recompute_average_cost(db, bootcamp.id)
        logger.info("Course created: %s in bootcamp %s", course.id, bootcamp.id)
        return course

    async def update(self, db: AsyncSession, course_id: str, data: CourseUpdate) -> Course:
        course = await self.get(db, course_id)
        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(course, key, value)
        await db.flush()
        await recompute_average_cost(db, course.bootcamp_id)
        await db.refresh(course)
        return course

    async def delete(self, db: AsyncSession, course_id: str) -> None:
        course = await self.get(db, course_id)
        bootcamp_id = course.bootcamp_id
        await db.delete(course)
        await db.flush()
        await recompute_average_cost(db, bootcamp_id)
        logger.info("Course deleted: %s", course_id)


course_service = CourseService()
