"""
DevCamper API — Bootcamp Aggregate Recompute
=============================================

What:  Keeps `Bootcamp.average_cost` and `Bootcamp.average_rating` in step
       with the bootcamp's live courses and reviews.
Why:   Both values are shown on every bootcamp listing and used as filters
       (`?averageCost[lte]=10000`), so they are stored rather than computed
       per request.
How:   A full recompute over all children after each create, update or
       delete. The arithmetic lives in two pure functions; the async
       triggers only load the child values and write the result.

Failure Policy:
    A failed recompute is logged with its traceback and swallowed. It runs
    inside a SAVEPOINT, so on PostgreSQL the failed statement only aborts
    the savepoint and the request transaction can still commit. The
    triggering course/review change still succeeds; the next change to the
    same bootcamp rewrites the value from scratch.
"""

import logging
import math
import uuid
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.models import Bootcamp, Course, Review

logger = logging.getLogger(__name__)


def average_cost(tuitions: Sequence[int]) -> Optional[int]:
    """Mean tuition rounded up to the next multiple of ten; None with no courses."""
    if not tuitions:
        return None
    mean = sum(tuitions) / len(tuitions)
    return int(math.ceil(mean / 10) * 10)


def average_rating(ratings: Sequence[int]) -> float:
    """Unrounded mean rating; 0 with no reviews."""
    if not ratings:
        return 0
    return sum(ratings) / len(ratings)


async def recompute_average_cost(db: AsyncSession, bootcamp_id: uuid.UUID) -> None:
    try:
        async with db.begin_nested():
            tuitions = (
                await db.scalars(select(Course.tuition).where(Course.bootcamp_id == bootcamp_id))
            ).all()
            value = average_cost(tuitions)
            await db.execute(
                update(Bootcamp).where(Bootcamp.id == bootcamp_id).values(average_cost=value)
            )
        logger.debug("Bootcamp %s average_cost=%s (%d courses)", bootcamp_id, value, len(tuitions))
    except Exception:
        logger.exception("Failed to recompute average cost for bootcamp %s", bootcamp_id)


async def recompute_average_rating(db: AsyncSession, bootcamp_id: uuid.UUID) -> None:
    try:
        async with db.begin_nested():
            ratings = (
                await db.scalars(select(Review.rating).where(Review.bootcamp_id == bootcamp_id))
            ).all()
            value = average_rating(ratings)
            await db.execute(
                update(Bootcamp).where(Bootcamp.id == bootcamp_id).values(average_rating=value)
            )
        logger.debug("Bootcamp %s average_rating=%s (%d reviews)", bootcamp_id, value, len(ratings))
    except Exception:
        logger.exception("Failed to recompute average rating for bootcamp %s", bootcamp_id)
