"""
DevCamper API — Authentication Routes
======================================

Endpoints:
    POST /api/v1/auth/register                     → {success, token} + cookie
    POST /api/v1/auth/login                        → {success, token} + cookie
    GET  /api/v1/auth/logout                       → clears the cookie
    GET  /api/v1/auth/me                           → current user
    PUT  /api/v1/auth/updatedetails                → name / email
    PUT  /api/v1/auth/updatepassword               → {success, token} + cookie
    POST /api/v1/auth/forgotpassword               → emails a reset link
    PUT  /api/v1/auth/resetpassword/{resettoken}   → {success, token} + cookie

Cookie:
    `token` is httpOnly, lives JWT_COOKIE_EXPIRE days and is marked secure in
    production. The API itself only reads the Authorization header; the
    cookie is a convenience for browser clients.
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.config import Settings
from devcamper.database import get_db_session
from devcamper.dependencies import get_mailer, get_security, get_settings, protect
from devcamper.models import User
from devcamper.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    UserResponse,
)
from devcamper.services.auth_service import auth_service
from devcamper.services.email_service import EmailService
from devcamper.services.security import SecurityService
from devcamper.utils import utcnow

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])

LOGOUT_COOKIE_SECONDS = 10


def send_token_response(
    user: User,
    security: SecurityService,
    settings: Settings,
    status_code: int = 200,
) -> JSONResponse:
    token = security.create_access_token(user.id)
    response = JSONResponse(status_code=status_code, content={"success": True, "token": token})
    max_age = settings.jwt_cookie_expire * 24 * 60 * 60
    response.set_cookie(
        "token",
        token,
        max_age=max_age,
        expires=utcnow() + timedelta(seconds=max_age),
        httponly=True,
        secure=settings.is_production,
    )
    return response


@router.post("/register", summary="Register a user or publisher")
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
    settings: Settings = Depends(get_settings),
):
    user = await auth_service.register(db, body, security)
    return send_token_response(user, security, settings)


@router.post("/login", summary="Log in with email and password")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
    settings: Settings = Depends(get_settings),
):
    user = await auth_service.login(db, body, security)
    return send_token_response(user, security, settings)


@router.get("/logout", summary="Clear the token cookie")
async def logout():
    response = JSONResponse(content={"success": True, "data": {}})
    response.set_cookie(
        "token",
        "none",
        max_age=LOGOUT_COOKIE_SECONDS,
        expires=utcnow() + timedelta(seconds=LOGOUT_COOKIE_SECONDS),
        httponly=True,
    )
    return response


@router.get("/me", summary="Current user")
async def me(user: User = Depends(protect)):
    return {"success": True, "data": UserResponse.model_validate(user).to_dict()}


@router.put("/updatedetails", summary="Update name and email")
async def update_details(
    body: UpdateDetailsRequest,
    user: User = Depends(protect),
    db: AsyncSession = Depends(get_db_session),
):
    user = await auth_service.update_details(db, user, body)
    return {"success": True, "data": UserResponse.model_validate(user).to_dict()}


@router.put("/updatepassword", summary="Change password")
async def update_password(
    body: UpdatePasswordRequest,
    user: User = Depends(protect),
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
    settings: Settings = Depends(get_settings),
):
    user = await auth_service.update_password(db, user, body, security)
    return send_token_response(user, security, settings)


@router.post("/forgotpassword", summary="Email a password reset link")
async def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
    mailer: EmailService = Depends(get_mailer),
):
    host = request.headers.get("host", request.url.netloc)
    base_url = f"{request.url.scheme}://{host}"
    await auth_service.forgot_password(db, body.email, base_url, security, mailer)
    return {"success": True, "data": "Email sent"}


@router.put("/resetpassword/{resettoken}", summary="Set a new password with a reset token")
async def reset_password(
    resettoken: str,
    body: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db_session),
    security: SecurityService = Depends(get_security),
    settings: Settings = Depends(get_settings),
):
    user = await auth_service.reset_password(db, resettoken, body, security)
    return send_token_response(user, security, settings)
