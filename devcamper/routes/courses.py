"""
DevCamper API — Course Routes
==============================

Endpoints:
    GET    /api/v1/courses                          list (advanced results, with bootcamp)
    GET    /api/v1/courses/{id}                     detail, with bootcamp
    PUT    /api/v1/courses/{id}                     publisher/admin + owner
    DELETE /api/v1/courses/{id}                     publisher/admin + owner
    GET    /api/v1/bootcamps/{bootcamp_id}/courses  all courses of one bootcamp
    POST   /api/v1/bootcamps/{bootcamp_id}/courses  publisher/admin, owner of the bootcamp
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import authorize, check_existence_ownership, protect
from devcamper.models import Course, Role, User
from devcamper.schemas.course import (
    COURSE_FIELDS,
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    CourseWithBootcamp,
)
from devcamper.services.course_service import course_service
from devcamper.services.query_service import AdvancedResults

router = APIRouter(prefix="/api/v1/courses", tags=["Courses"])
bootcamp_courses_router = APIRouter(prefix="/api/v1/bootcamps/{bootcamp_id}/courses", tags=["Courses"])

course_results = AdvancedResults(Course, CourseWithBootcamp, COURSE_FIELDS, populate="bootcamp")

publisher_or_admin = authorize(Role.PUBLISHER, Role.ADMIN)
owns_course = check_existence_ownership(Course)


# ── /bootcamps/{bootcamp_id}/courses ─────────────────────────────────────────

@bootcamp_courses_router.get("", summary="List the courses of a bootcamp")
async def list_bootcamp_courses(bootcamp_id: str, db: AsyncSession = Depends(get_db_session)):
    courses = await course_service.list_for_bootcamp(db, bootcamp_id)
    return {
        "success": True,
        "count": len(courses),
        "data": [CourseResponse.model_validate(c).to_dict() for c in courses],
    }


@bootcamp_courses_router.post(
    "",
    status_code=201,
    summary="Add a course to a bootcamp",
    dependencies=[Depends(publisher_or_admin)],
)
async def create_course(
    bootcamp_id: str,
    body: CourseCreate,
    user: User = Depends(protect),
    db: AsyncSession = Depends(get_db_session),
):
    course = await course_service.create(db, user, bootcamp_id, body)
    return {"success": True, "data": CourseResponse.model_validate(course).to_dict()}


# ── /courses ─────────────────────────────────────────────────────────────────

@router.get("", summary="List courses")
async def list_courses(results: Dict[str, Any] = Depends(course_results)):
    return results


@router.get("/{id}", summary="Get one course")
async def get_course(id: str, db: AsyncSession = Depends(get_db_session)):
    course = await course_service.get(db, id, with_bootcamp=True)
    return {"success": True, "data": CourseWithBootcamp.model_validate(course).to_dict()}


@router.put(
    "/{id}",
    summary="Update a course",
    dependencies=[Depends(publisher_or_admin), Depends(owns_course)],
)
async def update_course(id: str, body: CourseUpdate, db: AsyncSession = Depends(get_db_session)):
    course = await course_service.update(db, id, body)
    return {"success": True, "data": CourseResponse.model_validate(course).to_dict()}


@router.delete(
    "/{id}",
    summary="Delete a course",
    dependencies=[Depends(publisher_or_admin), Depends(owns_course)],
)
async def delete_course(id: str, db: AsyncSession = Depends(get_db_session)):
    await course_service.delete(db, id)
    return {"success": True, "data": {}}
