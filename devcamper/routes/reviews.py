"""
DevCamper API — Review Routes
==============================

Endpoints:
    GET    /api/v1/reviews                          list (advanced results, with bootcamp)
    GET    /api/v1/reviews/{id}                     detail, with bootcamp
    PUT    /api/v1/reviews/{id}                     user/admin + owner
    DELETE /api/v1/reviews/{id}                     user/admin + owner
    GET    /api/v1/bootcamps/{bootcamp_id}/reviews  all reviews of one bootcamp
    POST   /api/v1/bootcamps/{bootcamp_id}/reviews  user/admin; one review per bootcamp
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import authorize, check_existence_ownership, protect
from devcamper.models import Review, Role, User
from devcamper.schemas.review import (
    REVIEW_FIELDS,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithBootcamp,
)
from devcamper.services.query_service import AdvancedResults
from devcamper.services.review_service import review_service

router = APIRouter(prefix="/api/v1/reviews", tags=["Reviews"])
bootcamp_reviews_router = APIRouter(prefix="/api/v1/bootcamps/{bootcamp_id}/reviews", tags=["Reviews"])

review_results = AdvancedResults(Review, ReviewWithBootcamp, REVIEW_FIELDS, populate="bootcamp")

user_or_admin = authorize(Role.USER, Role.ADMIN)
owns_review = check_existence_ownership(Review)


@bootcamp_reviews_router.get("", summary="List the reviews of a bootcamp")
async def list_bootcamp_reviews(bootcamp_id: str, db: AsyncSession = Depends(get_db_session)):
    reviews = await review_service.list_for_bootcamp(db, bootcamp_id)
    return {
        "success": True,
        "count": len(reviews),
        "data": [ReviewResponse.model_validate(r).to_dict() for r in reviews],
    }


@bootcamp_reviews_router.post(
    "",
    status_code=201,
    summary="Review a bootcamp",
    dependencies=[Depends(user_or_admin)],
)
async def create_review(
    bootcamp_id: str,
    body: ReviewCreate,
    user: User = Depends(protect),
    db: AsyncSession = Depends(get_db_session),
):
    review = await review_service.create(db, user, bootcamp_id, body)
    return {"success": True, "data": ReviewResponse.model_validate(review).to_dict()}


@router.get("", summary="List reviews")
async def list_reviews(results: Dict[str, Any] = Depends(review_results)):
    return results


@router.get("/{id}", summary="Get one review")
async def get_review(id: str, db: AsyncSession = Depends(get_db_session)):
    review = await review_service.get(db, id, with_bootcamp=True)
    return {"success": True, "data": ReviewWithBootcamp.model_validate(review).to_dict()}


@router.put(
    "/{id}",
    summary="Update a review",
    dependencies=[Depends(user_or_admin), Depends(owns_review)],
)
async def update_review(id: str, body: ReviewUpdate, db: AsyncSession = Depends(get_db_session)):
    review = await review_service.update(db, id, body)
    return {"success": True, "data": ReviewResponse.model_validate(review).to_dict()}


@router.delete(
    "/{id}",
    summary="Delete a review",
    dependencies=[Depends(user_or_admin), Depends(owns_review)],
)
async def delete_review(id: str, db: AsyncSession = Depends(get_db_session)):
    await review_service.delete(db, id)
    return {"success": True, "data": {}}
