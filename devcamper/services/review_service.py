"""
DevCamper API — Review Service
===============================

Review CRUD with `average_rating` recompute after every write. A second
review of the same bootcamp by the same user trips the
`uq_reviews_bootcamp_user` constraint on flush and is reported as 409.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from devcamper.exceptions import NotFoundError
from devcamper.models import Bootcamp, Review, User
from devcamper.schemas.review import ReviewCreate, ReviewUpdate
from devcamper.services.aggregate_service import recompute_average_rating
from devcamper.utils import parse_id

logger = logging.getLogger(__name__)


class ReviewService:
    async def list_for_bootcamp(self, db: AsyncSession, bootcamp_id: str) -> List[Review]:
        result = await db.scalars(
            select(Review)
            .where(Review.bootcamp_id == parse_id(bootcamp_id, "Bootcamp"))
            .order_by(Review.created_at)
        )
        return list(result.all())

    async def get(self, db: AsyncSession, review_id: str, with_bootcamp: bool = False) -> Review:
        stmt = select(Review).where(Review.id == parse_id(review_id, "Review"))
        if with_bootcamp:
            stmt = stmt.options(selectinload(Review.bootcamp))
        review = await db.scalar(stmt)
        if review is None:
            raise NotFoundError(
                resource="Review",
                resource_id=review_id,
                message=f"No review found with the id of {review_id}",
            )
        return review

    async def create(
        self,
        db: AsyncSession,
        user: User,
        bootcamp_id: str,
        data: ReviewCreate,
    ) -> Review:
        bootcamp = await db.get(Bootcamp, parse_id(bootcamp_id, "Bootcamp"))
        if bootcamp is None:
            raise NotFoundError(
                resource="Bootcamp",
                resource_id=bootcamp_id,
                message=f"No bootcamp with the id of {bootcamp_id}",
            )

        review = Review(**data.model_dump(), bootcamp_id=bootcamp.id, user_id=user.id)
        db.add(review)
        await db.flush()
        await recompute_average_rating(db, bootcamp.id)
        logger.info("Review created: %s for bootcamp %s", review.id, bootcamp.id)
        return review

    async def update(self, db: AsyncSession, review_id: str, data: ReviewUpdate) -> Review:
        review = await self.get(db, review_id)
        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(review, key, value)
        await db.flush()
        await recompute_average_rating(db, review.bootcamp_id)
        await db.refresh(review)
        return review

    async def delete(self, db: AsyncSession, review_id: str) -> None:
        review = await self.get(db, review_id)
        bootcamp_id = review.bootcamp_id
        await db.delete(review)
        await db.flush()
        await recompute_average_rating(db, bootcamp_id)
        logger.info("Review deleted: %s", review_id)


review_service = ReviewService()
