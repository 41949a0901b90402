"""
DevCamper API — Request Dependencies & Authorization Guard
===========================================================

What:  FastAPI dependencies that hand route handlers their collaborators
       (settings, security, geocoder, mailer, file storage) and enforce
       authentication, role membership and resource ownership.
Why:   Collaborators live on `app.state`, built once by `create_app()`; tests
       replace them there. The guard runs as dependencies so a rejected
       request never reaches the handler.

Guard Chain (mutating routes):
    protect                        → who is calling?            401
    authorize("publisher", "admin") → is the role allowed?        403
    check_existence_ownership(M)   → does the record exist and
                                     belong to the caller?       404 / 403

    `protect` is declared once per route and cached by FastAPI for the
    request, so the user is loaded once even when several guards need it.

Usage:
    @router.put(
        "/{id}",
        dependencies=[
            Depends(authorize(Role.PUBLISHER, Role.ADMIN)),
            Depends(check_existence_ownership(Bootcamp)),
        ],
    )
    async def update_bootcamp(id: str, user: User = Depends(protect), ...):
"""

import logging
from typing import Any, Callable, Union

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.config import Settings
from devcamper.database import get_db_session
from devcamper.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from devcamper.models import Role, User
from devcamper.services.email_service import EmailService
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import Geocoder
from devcamper.services.security import SecurityService
from devcamper.utils import parse_id

logger = logging.getLogger(__name__)


# ── Collaborators from app.state ─────────────────────────────────────────────

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_security(request: Request) -> SecurityService:
    return request.app.state.security


def get_geocoder(request: Request) -> Geocoder:
    return request.app.state.geocoder


def get_mailer(request: Request) -> EmailService:
    return request.app.state.mailer


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


# ── Authentication ───────────────────────────────────────────────────────────

async def protect(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
) -> User:
    """
    Resolve the bearer token in the Authorization header to a User.

    Raises:
        UnauthorizedError: missing/malformed header, bad signature, expired
                           token, or a token for a user that no longer exists
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise UnauthorizedError()

    user_id = security.decode_access_token(token.strip())
    user = await db.get(User, user_id)
    if user is None:
        logger.info("Token presented for missing user %s", user_id)
        raise UnauthorizedError()
    return user


def authorize(*roles: Union[Role, str]) -> Callable[..., Any]:
    """Dependency factory: 403 unless the caller's role is one of `roles`."""
    allowed = {role.value if isinstance(role, Role) else role for role in roles}

    async def dependency(user: User = Depends(protect)) -> User:
        if user.role not in allowed:
            raise ForbiddenError(
                message=f"User role {user.role} is not authorized to access this route"
            )
        return user

    return dependency


def check_existence_ownership(model: Any) -> Callable[..., Any]:
    """
    Dependency factory: the record named by the `id` path parameter must
    exist and belong to the caller. Admins pass without a lookup.
    """

    async def dependency(
        request: Request,
        user: User = Depends(protect),
        db: AsyncSession = Depends(get_db_session),
    ) -> None:
        if user.is_admin:
            return

        raw_id = request.path_params.get("id", "")
        record = await db.get(model, parse_id(raw_id))
        if record is None:
            raise NotFoundError(resource_id=raw_id)
        if record.user_id != user.id:
            raise ForbiddenError()

    return dependency
