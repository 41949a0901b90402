"""
DevCamper API — User & Auth Schemas
====================================

What:  Bodies for the auth flow (register, login, details, password change,
       forgot/reset) and the admin user-management endpoints, plus the
       public user shape.
Why:   The password hash and reset-token fields never leave the server;
       `UserResponse` simply has no field for them.

Notes:
    - Self-registration may only pick `user` or `publisher`; admins are
      created through POST /users or directly in the database.
    - `UserUpdate.password` exists only so the service can detect it and
      refuse the update (admins cannot set other users' passwords).
    - Passwords are never run through `sanitize()`.
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from devcamper.models.common import Role
from devcamper.schemas.common import CleanStr, RequestSchema, ResponseSchema, public_field_map

PASSWORD_MIN_LENGTH = 6


# ── Auth ─────────────────────────────────────────────────────────────────────

class RegisterRequest(RequestSchema):
    name: CleanStr = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    role: Literal["user", "publisher"] = "user"


class LoginRequest(RequestSchema):
    # Optional so a missing field gets the dedicated 400 message
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateDetailsRequest(RequestSchema):
    name: Optional[CleanStr] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None


class UpdatePasswordRequest(RequestSchema):
    current_password: str
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class ForgotPasswordRequest(RequestSchema):
    email: str


class ResetPasswordRequest(RequestSchema):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


# ── Users (admin) ────────────────────────────────────────────────────────────

class UserCreate(RequestSchema):
    name: CleanStr = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    role: Role = Role.USER


class UserUpdate(RequestSchema):
    name: Optional[CleanStr] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    password: Optional[str] = None


class UserResponse(ResponseSchema):
    id: uuid.UUID
    name: str
    email: str
    role: str
    created_at: datetime


USER_FIELDS = public_field_map(UserResponse)
