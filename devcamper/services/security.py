"""
DevCamper API — Credentials: Password Hashing, Bearer Tokens, Reset Tokens
===========================================================================

What:  Everything that turns secrets into verifiable values.
Why:   One object built from Settings, so the signing secret, token lifetime
       and bcrypt cost are read in exactly one place.

Bearer tokens:
    HS256 JWT with claims {"id": <user uuid>, "iat", "exp"}; lifetime is
    JWT_EXPIRE_DAYS. An expired token is reported separately so the client
    can prompt for a fresh login.

Reset tokens:
    20 random bytes, hex encoded, are emailed to the user. Only the sha256
    hex digest is stored, with a 10 minute expiry.
"""

import hashlib
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Tuple

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from devcamper.config import Settings
from devcamper.exceptions import UnauthorizedError
from devcamper.utils import utcnow

JWT_ALGORITHM = "HS256"
RESET_TOKEN_BYTES = 20
RESET_TOKEN_TTL = timedelta(minutes=10)


class SecurityService:
    def __init__(self, settings: Settings):
        self._secret = settings.jwt_secret
        self._expire = timedelta(days=settings.jwt_expire_days)
        self._pwd = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )

    # ── Passwords ─────────────────────────────────────────────────────────
    def hash_password(self, password: str) -> str:
        return self._pwd.hash(password)

    def verify_password(self, password: str, hashed: str) -> bool:
        return self._pwd.verify(password, hashed)

    # ── Bearer tokens ─────────────────────────────────────────────────────
    def create_access_token(self, user_id: uuid.UUID) -> str:
        now = utcnow()
        claims = {"id": str(user_id), "iat": now, "exp": now + self._expire}
        return jwt.encode(claims, self._secret, algorithm=JWT_ALGORITHM)

    def decode_access_token(self, token: str) -> uuid.UUID:
        """
        Verify signature and expiry, returning the user id claim.

        Raises:
            UnauthorizedError: "Please log in again" when expired, the generic
                               401 message for any other defect
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except ExpiredSignatureError:
            raise UnauthorizedError(message="Please log in again")
        except JWTError as e:
            raise UnauthorizedError(context={"jwt_error": str(e)})

        try:
            return uuid.UUID(str(claims["id"]))
        except (KeyError, ValueError):
            raise UnauthorizedError(context={"jwt_error": "missing or malformed id claim"})

    # ── Reset tokens ──────────────────────────────────────────────────────
    @staticmethod
    def hash_reset_token(raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()

    def generate_reset_token(self) -> Tuple[str, str, datetime]:
        """Returns (raw token to email, digest to store, expiry)."""
        raw = secrets.token_hex(RESET_TOKEN_BYTES)
        return raw, self.hash_reset_token(raw), utcnow() + RESET_TOKEN_TTL
