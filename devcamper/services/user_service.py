"""
DevCamper API — User Service (admin user management)
=====================================================

What:  Lookup, create, update and delete of user accounts on behalf of an
       admin.
Why:   Deleting a user reaches into every other table; that cleanup belongs
       next to the other user rules rather than in a route.

Delete Cascade:
    1. Bootcamps owned by the user, with all of their courses and reviews
    2. The user's reviews elsewhere  → recompute those bootcamps' ratings
    3. The user's courses elsewhere  → recompute those bootcamps' costs
    4. The user row
"""

import logging
from typing import Set

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.exceptions import ForbiddenError, NotFoundError
from devcamper.models import Bootcamp, Course, Review, User
from devcamper.schemas.user import UserCreate, UserUpdate
from devcamper.services.aggregate_service import recompute_average_cost, recompute_average_rating
from devcamper.services.bootcamp_service import bootcamp_service
from devcamper.services.security import SecurityService
from devcamper.utils import parse_id

logger = logging.getLogger(__name__)


class UserService:
    async def get(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, parse_id(user_id, "User"))
        if user is None:
            raise NotFoundError(
                resource="User",
                resource_id=user_id,
                message=f"User with id {user_id} not found.",
            )
        return user

    async def create(self, db: AsyncSession, data: UserCreate, security: SecurityService) -> User:
        user = User(
            name=data.name,
            email=data.email,
            role=data.role.value,
            password=security.hash_password(data.password),
        )
        db.add(user)
        await db.flush()
        logger.info("User created by admin: %s (%s)", user.id, user.role)
        return user

    async def update(self, db: AsyncSession, user_id: str, data: UserUpdate) -> User:
        if data.password is not None:
            raise ForbiddenError(message="Admins cannot update user passwords.")

        user = await self.get(db, user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})
        if "role" in changes:
            changes["role"] = data.role.value
        for key, value in changes.items():
            setattr(user, key, value)
        await db.flush()
        await db.refresh(user)
        return user

    async def delete(self, db: AsyncSession, user_id: str) -> None:
        user = await self.get(db, user_id)

        owned = (await db.scalars(select(Bootcamp.id).where(Bootcamp.user_id == user.id))).all()
        await bootcamp_service.delete_many(db, list(owned))

        rated: Set = set(
            (await db.scalars(select(Review.bootcamp_id).where(Review.user_id == user.id))).all()
        )
        await db.execute(delete(Review).where(Review.user_id == user.id))
        for bootcamp_id in rated:
            await recompute_average_rating(db, bootcamp_id)

        priced: Set = set(
            (await db.scalars(select(Course.bootcamp_id).where(Course.user_id == user.id))).all()
        )
        await db.execute(delete(Course).where(Course.user_id == user.id))
        for bootcamp_id in priced:
            await recompute_average_cost(db, bootcamp_id)

        await db.delete(user)
        await db.flush()
        logger.info(
            "User deleted: %s (%d bootcamps, %d rated, %d priced)",
            user_id, len(owned), len(rated), len(priced),
        )


user_service = UserService()
