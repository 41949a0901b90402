"""
DevCamper API — Authentication Service
=======================================

What:  Register, login, profile updates and the forgot/reset password flow.
Why:   These operations are the only code allowed to read the password hash
       (deferred on the model) and to write the reset-token columns.

Password Reset Flow:
    1. POST /auth/forgotpassword {email}
       → a raw token is generated, its sha256 digest and a 10 minute expiry
         are stored, and the raw token is emailed inside the reset URL
    2. PUT /auth/resetpassword/{token} {password}
       → the digest of the path token is matched against unexpired rows;
         on success the password is replaced and the token cleared

    If the email cannot be sent, the token columns are cleared and committed
    before the 500 is raised, so no usable token is left behind.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from devcamper.exceptions import EmailDeliveryError, NotFoundError, UnauthorizedError, ValidationError
from devcamper.models import User
from devcamper.schemas.user import (
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
)
from devcamper.services.email_service import EmailService
from devcamper.services.security import SecurityService
from devcamper.utils import utcnow

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Password reset token"


class AuthService:
    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
        security: SecurityService,
    ) -> User:
        user = User(
            name=data.name,
            email=data.email,
            role=data.role,
            password=security.hash_password(data.password),
        )
        db.add(user)
        await db.flush()
        logger.info("User registered: %s (%s)", user.id, user.role)
        return user

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
        security: SecurityService,
    ) -> User:
        if not data.email or not data.password:
            raise ValidationError(message="Please provide an email and password")

        user = await db.scalar(
            select(User).options(undefer(User.password)).where(User.email == data.email)
        )
        if user is None or not security.verify_password(data.password, user.password):
            logger.info("Failed login for %s", data.email)
            raise UnauthorizedError(message="Invalid credentials")
        return user

    async def update_details(
        self,
        db: AsyncSession,
        user: User,
        data: UpdateDetailsRequest,
    ) -> User:
        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, key, value)
        await db.flush()
        await db.refresh(user)
        return user

    async def update_password(
        self,
        db: AsyncSession,
        user: User,
        data: UpdatePasswordRequest,
        security: SecurityService,
    ) -> User:
        user = await db.scalar(
            select(User)
            .options(undefer(User.password))
            .where(User.id == user.id)
            .execution_options(populate_existing=True)
        )
        if not security.verify_password(data.current_password, user.password):
            raise UnauthorizedError(message="Password is incorrect.")

        user.password = security.hash_password(data.new_password)
        await db.flush()
        logger.info("Password changed for user %s", user.id)
        return user

    async def forgot_password(
        self,
        db: AsyncSession,
        email: str,
        base_url: str,
        security: SecurityService,
        mailer: EmailService,
    ) -> None:
        user = await db.scalar(select(User).where(User.email == email))
        if user is None:
            raise NotFoundError(resource="User", message="There is no user with that email.")

        raw_token, digest, expires = security.generate_reset_token()
        user.reset_password_token = digest
        user.reset_password_expire = expires
        await db.flush()

        reset_url = f"{base_url.rstrip('/')}/api/v1/auth/resetpassword/{raw_token}"
        message = (
            "You are receiving this email because you (or someone else) has "
            f"requested the reset of a password. Please make a PUT request to: \n\n {reset_url}"
        )
        try:
            await mailer.send(to=user.email, subject=RESET_EMAIL_SUBJECT, text=message)
        except EmailDeliveryError:
            user.reset_password_token = None
            user.reset_password_expire = None
            await db.commit()
            raise

    async def reset_password(
        self,
        db: AsyncSession,
        raw_token: str,
        data: ResetPasswordRequest,
        security: SecurityService,
    ) -> User:
        user = await db.scalar(
            select(User).where(
                User.reset_password_token == security.hash_reset_token(raw_token),
                User.reset_password_expire > utcnow(),
            )
        )
        if user is None:
            raise ValidationError(message="Invalid token")

        user.password = security.hash_password(data.password)
        user.reset_password_token = None
        user.reset_password_expire = None
        await db.flush()
        logger.info("Password reset for user %s", user.id)
        return user


auth_service = AuthService()
