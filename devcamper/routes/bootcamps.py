"""
DevCamper API — Bootcamp Routes
================================

Endpoints:
    GET    /api/v1/bootcamps                          list (advanced results, with courses)
    POST   /api/v1/bootcamps                          create        publisher/admin
    GET    /api/v1/bootcamps/{id}                     detail
    PUT    /api/v1/bootcamps/{id}                     update        publisher/admin + owner
    DELETE /api/v1/bootcamps/{id}                     delete        publisher/admin + owner
    PUT    /api/v1/bootcamps/{id}/photo               photo upload  publisher/admin + owner
    GET    /api/v1/bootcamps/radius/{zipcode}/{distance}

Nested course and review routes are mounted by routes/courses.py and
routes/reviews.py under /api/v1/bootcamps/{bootcamp_id}/...
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import (
    authorize,
    check_existence_ownership,
    get_file_service,
    get_geocoder,
    protect,
)
from devcamper.exceptions import ValidationError
from devcamper.models import Bootcamp, Role, User
from devcamper.schemas.bootcamp import (
    BOOTCAMP_FIELDS,
    BootcampCreate,
    BootcampResponse,
    BootcampUpdate,
    BootcampWithCourses,
)
from devcamper.services.bootcamp_service import bootcamp_service
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import Geocoder
from devcamper.services.query_service import AdvancedResults

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bootcamps", tags=["Bootcamps"])

bootcamp_results = AdvancedResults(Bootcamp, BootcampWithCourses, BOOTCAMP_FIELDS, populate="courses")

publisher_or_admin = authorize(Role.PUBLISHER, Role.ADMIN)
owns_bootcamp = check_existence_ownership(Bootcamp)


@router.get("", summary="List bootcamps")
async def list_bootcamps(results: Dict[str, Any] = Depends(bootcamp_results)):
    return results


@router.get("/radius/{zipcode}/{distance}", summary="Bootcamps within a radius of a zipcode")
async def bootcamps_in_radius(
    zipcode: str,
    distance: str,
    db: AsyncSession = Depends(get_db_session),
    geocoder: Geocoder = Depends(get_geocoder),
):
    bootcamps = await bootcamp_service.in_radius(db, zipcode, distance, geocoder)
    return {
        "success": True,
        "count": len(bootcamps),
        "data": [BootcampResponse.model_validate(b).to_dict() for b in bootcamps],
    }


@router.get("/{id}", summary="Get one bootcamp")
async def get_bootcamp(id: str, db: AsyncSession = Depends(get_db_session)):
    bootcamp = await bootcamp_service.get(db, id)
    return {"success": True, "data": BootcampResponse.model_validate(bootcamp).to_dict()}


@router.post(
    "",
    status_code=201,
    summary="Create a bootcamp",
    dependencies=[Depends(publisher_or_admin)],
)
async def create_bootcamp(
    body: BootcampCreate,
    user: User = Depends(protect),
    db: AsyncSession = Depends(get_db_session),
    geocoder: Geocoder = Depends(get_geocoder),
):
    bootcamp = await bootcamp_service.create(db, user, body, geocoder)
    return {"success": True, "data": BootcampResponse.model_validate(bootcamp).to_dict()}


@router.put(
    "/{id}",
    summary="Update a bootcamp",
    dependencies=[Depends(publisher_or_admin), Depends(owns_bootcamp)],
)
async def update_bootcamp(
    id: str,
    body: BootcampUpdate,
    db: AsyncSession = Depends(get_db_session),
    geocoder: Geocoder = Depends(get_geocoder),
):
    bootcamp = await bootcamp_service.update(db, id, body, geocoder)
    return {"success": True, "data": BootcampResponse.model_validate(bootcamp).to_dict()}


@router.delete(
    "/{id}",
    summary="Delete a bootcamp with its courses and reviews",
    dependencies=[Depends(publisher_or_admin), Depends(owns_bootcamp)],
)
async def delete_bootcamp(id: str, db: AsyncSession = Depends(get_db_session)):
    await bootcamp_service.delete(db, id)
    return {"success": True, "data": {}}


@router.put(
    "/{id}/photo",
    summary="Upload a bootcamp photo",
    dependencies=[Depends(publisher_or_admin), Depends(owns_bootcamp)],
)
async def upload_bootcamp_photo(
    id: str,
    file: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db_session),
    file_service: FileService = Depends(get_file_service),
):
    if file is None:
        raise ValidationError(message="Please upload a file", field="file")

    content = await file.read()
    filename = await bootcamp_service.upload_photo(
        db, id, file.filename, file.content_type, content, file_service
    )
    return {"success": True, "data": filename}
