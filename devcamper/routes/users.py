"""
DevCamper API — User Management Routes (admin only)
====================================================

Every route in this module requires an admin bearer token; the guard is
attached to the router itself.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import authorize, get_security
from devcamper.models import Role, User
from devcamper.schemas.user import USER_FIELDS, UserCreate, UserResponse, UserUpdate
from devcamper.services.query_service import AdvancedResults
from devcamper.services.security import SecurityService
from devcamper.services.user_service import user_service

router = APIRouter(
    prefix="/api/v1/users",
    tags=["Users"],
    dependencies=[Depends(authorize(Role.ADMIN))],
)

user_results = AdvancedResults(User, UserResponse, USER_FIELDS)


@router.get("", summary="List users")
async def list_users(results: Dict[str, Any] = Depends(user_results)):
    return results


@router.get("/{id}", summary="Get one user")
async def get_user(id: str, db: AsyncSession = Depends(get_db_session)):
    user = await user_service.get(db, id)
    return {"success": True, "data": UserResponse.model_validate(user).to_dict()}


@router.post("", status_code=201, summary="Create a user")
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
):
    user = await user_service.create(db, body, security)
    return {"success": True, "data": UserResponse.model_validate(user).to_dict()}


@router.put("/{id}", summary="Update a user")
async def update_user(id: str, body: UserUpdate, db: AsyncSession = Depends(get_db_session)):
    user = await user_service.update(db, id, body)
    return {"success": True, "data": UserResponse.model_validate(user).to_dict()}


@router.delete("/{id}", summary="Delete a user and everything they own")
async def delete_user(id: str, db: AsyncSession = Depends(get_db_session)):
    await user_service.delete(db, id)
    return {"success": True, "data": {}}
