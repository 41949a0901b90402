"""
DevCamper API — Bootcamp Service
=================================

What:  Create, update, delete, radius search and photo upload for bootcamps.
Why:   Bootcamp writes involve collaborators (geocoder, file storage) and
       cross-table cleanup; routes stay limited to HTTP concerns.

Business Rules:
    - A non-admin user may publish one bootcamp (409 on a second); admins
      may publish many.
    - `address` is geocoded into the location columns on create, and again
      whenever an update carries a new address.
    - `slug` follows `name`.
    - Deleting a bootcamp deletes its courses and reviews first.

Radius Search:
    The zipcode is geocoded to a point and bootcamps are kept when their
    great-circle distance from it is within the requested miles. The
    haversine check is a pure function, `within_radius()`.
"""

import logging
import math
from typing import List, Optional

from slugify import slugify
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.exceptions import ConflictError, NotFoundError, ValidationError
from devcamper.models import Bootcamp, Course, Review, User
from devcamper.schemas.bootcamp import BootcampCreate, BootcampUpdate
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import Geocoder
from devcamper.utils import parse_id

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3963


def within_radius(
    origin_lat: float,
    origin_lng: float,
    lat: float,
    lng: float,
    radius_miles: float,
) -> bool:
    """True when (lat, lng) lies within `radius_miles` of the origin."""
    phi1, phi2 = math.radians(origin_lat), math.radians(lat)
    d_phi = math.radians(lat - origin_lat)
    d_lambda = math.radians(lng - origin_lng)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    distance = 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(a)))
    return distance <= radius_miles


class BootcampService:
    """Stateless; collaborators are passed in per call."""

    async def get(self, db: AsyncSession, bootcamp_id: str) -> Bootcamp:
        bootcamp = await db.get(Bootcamp, parse_id(bootcamp_id, "Bootcamp"))
        if bootcamp is None:
            raise NotFoundError(resource="Bootcamp", resource_id=bootcamp_id)
        return bootcamp

    async def create(
        self,
        db: AsyncSession,
        user: User,
        data: BootcampCreate,
        geocoder: Geocoder,
    ) -> Bootcamp:
        if not user.is_admin:
            published = await db.scalar(
                select(Bootcamp.id).where(Bootcamp.user_id == user.id).limit(1)
            )
            if published is not None:
                raise ConflictError(
                    message=f"The user with ID {user.id} has already published a bootcamp",
                    context={"bootcamp_id": str(published)},
                )

        location = await geocoder.geocode(data.address)
        bootcamp = Bootcamp(
            **data.model_dump(exclude={"address"}),
            **location.as_columns(),
            slug=slugify(data.name),
            user_id=user.id,
        )
        db.add(bootcamp)
        await db.flush()
        logger.info("Bootcamp created: %s by user %s", bootcamp.id, user.id)
        return bootcamp

    async def update(
        self,
        db: AsyncSession,
        bootcamp_id: str,
        data: BootcampUpdate,
        geocoder: Geocoder,
    ) -> Bootcamp:
        bootcamp = await self.get(db, bootcamp_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        address = changes.pop("address", None)
        if address is not None:
            location = await geocoder.geocode(address)
            changes.update(location.as_columns())
        if "name" in changes:
            changes["slug"] = slugify(changes["name"])

        for key, value in changes.items():
            setattr(bootcamp, key, value)
        await db.flush()
        await db.refresh(bootcamp)
        logger.info("Bootcamp updated: %s (%s)", bootcamp.id, ", ".join(sorted(changes)) or "no changes")
        return bootcamp

    async def delete(self, db: AsyncSession, bootcamp_id: str) -> None:
        bootcamp = await self.get(db, bootcamp_id)
        await self.delete_many(db, [bootcamp.id])
        logger.info("Bootcamp deleted: %s", bootcamp_id)

    async def delete_many(self, db: AsyncSession, bootcamp_ids: List) -> None:
        """Delete bootcamps together with their courses and reviews."""
        if not bootcamp_ids:
            return
        await db.execute(delete(Course).where(Course.bootcamp_id.in_(bootcamp_ids)))
        await db.execute(delete(Review).where(Review.bootcamp_id.in_(bootcamp_ids)))
        await db.execute(delete(Bootcamp).where(Bootcamp.id.in_(bootcamp_ids)))
        await db.flush()

    async def in_radius(
        self,
        db: AsyncSession,
        zipcode: str,
        distance: str,
        geocoder: Geocoder,
    ) -> List[Bootcamp]:
        try:
            radius = float(distance)
        except ValueError:
            raise ValidationError(message=f"Invalid distance '{distance}'", field="distance")
        if radius < 0 or math.isnan(radius):
            raise ValidationError(message=f"Invalid distance '{distance}'", field="distance")

        origin = await geocoder.geocode(zipcode)
        candidates = (
            await db.scalars(
                select(Bootcamp)
                .where(Bootcamp.latitude.is_not(None), Bootcamp.longitude.is_not(None))
                .order_by(Bootcamp.created_at.desc())
            )
        ).all()
        return [
            bootcamp
            for bootcamp in candidates
            if within_radius(origin.latitude, origin.longitude, bootcamp.latitude, bootcamp.longitude, radius)
        ]

    async def upload_photo(
        self,
        db: AsyncSession,
        bootcamp_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
        file_service: FileService,
    ) -> str:
        bootcamp = await self.get(db, bootcamp_id)
        stored = await file_service.save_bootcamp_photo(bootcamp.id, filename, content_type, content)
        bootcamp.photo = stored
        await db.flush()
        return stored


bootcamp_service = BootcampService()
