"""
DevCamper API — Aggregate Recompute Tests
==========================================

What we test:
    ✅ average_cost rounds the mean up to the next multiple of ten
    ✅ average_cost is None with no courses
    ✅ average_rating is the unrounded mean, 0 with no reviews
    ✅ recompute writes the value on a real session
    ✅ a failing recompute is logged, rolled back to its savepoint, and the
       surrounding course insert still commits
"""

import logging

import pytest
from sqlalchemy import Column, Integer, MetaData, Table, Uuid

from devcamper.models import Bootcamp, Course
from devcamper.services import aggregate_service

from devcamper.services.aggregate_service import (
    average_cost,
    average_rating,
    recompute_average_cost,
    recompute_average_rating,
)


class TestAverageCost:
    def test_rounds_up_to_next_ten(self):
        assert average_cost([8000, 10001]) == 9010

    def test_exact_multiple_unchanged(self):
        assert average_cost([10000, 12000]) == 11000

    def test_single_course(self):
        assert average_cost([1]) == 10

    def test_free_course(self):
        assert average_cost([0]) == 0

    def test_no_courses(self):
        assert average_cost([]) is None


class TestAverageRating:
    def test_unrounded_mean(self):
        assert average_rating([8, 7, 10]) == pytest.approx(25 / 3)

    def test_no_reviews(self):
        assert average_rating([]) == 0


# A table the schema never creates; selecting from it fails in the database
_missing_courses = Table(
    "missing_courses",
    MetaData(),
    Column("tuition", Integer),
    Column("bootcamp_id", Uuid),
)


def _course(bootcamp, tuition):
    return Course(
        title="Intro",
        description="Basics",
        weeks="4",
        tuition=tuition,
        minimum_skill="beginner",
        bootcamp_id=bootcamp.id,
        user_id=bootcamp.user_id,
    )


class TestRecompute:
    @pytest.mark.asyncio
    async def test_writes_average_cost(self, app, db, make_user, make_bootcamp):
        bootcamp = await make_bootcamp(await make_user(role="publisher"))
        db.add_all([_course(bootcamp, 8000), _course(bootcamp, 10001)])
        await db.flush()

        await recompute_average_cost(db, bootcamp.id)
        await db.commit()

        async with app.state.session_factory() as session:
            assert (await session.get(Bootcamp, bootcamp.id)).average_cost == 9010

    @pytest.mark.asyncio
    async def test_failure_keeps_the_outer_transaction(
        self, app, db, make_user, make_bootcamp, monkeypatch, caplog
    ):
        bootcamp = await make_bootcamp(await make_user(role="publisher"))
        course = _course(bootcamp, 5000)
        db.add(course)
        await db.flush()
        course_id = course.id

        monkeypatch.setattr(aggregate_service, "Course", _missing_courses.c)
        with caplog.at_level(logging.ERROR, logger="devcamper.services.aggregate_service"):
            await recompute_average_cost(db, bootcamp.id)
        assert "Failed to recompute average cost" in caplog.text

        # The session is still usable and the insert commits
        await recompute_average_rating(db, bootcamp.id)
        await db.commit()

        async with app.state.session_factory() as session:
            assert await session.get(Course, course_id) is not None
            stored = await session.get(Bootcamp, bootcamp.id)
            assert stored.average_cost is None
            assert stored.average_rating == 0
