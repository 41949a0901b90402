"""
DevCamper API — Credential Handling Tests
==========================================

What we test:
    ✅ bcrypt hash verifies the right password only
    ✅ bearer token round trip carries the user id
    ✅ expired, tampered and foreign-key-signed tokens are rejected with 401
    ✅ reset tokens: raw value is 40 hex chars, only the digest is stored
"""

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from devcamper.config import Settings
from devcamper.exceptions import UnauthorizedError
from devcamper.services.security import RESET_TOKEN_TTL, SecurityService
from devcamper.utils import utcnow

SECRET = "unit-test-secret"


@pytest.fixture
def security() -> SecurityService:
    return SecurityService(Settings(_env_file=None, jwt_secret=SECRET, bcrypt_rounds=4))


class TestPasswords:
    def test_hash_verifies(self, security):
        hashed = security.hash_password("123456")
        assert hashed != "123456"
        assert security.verify_password("123456", hashed)
        assert not security.verify_password("654321", hashed)


class TestAccessTokens:
    def test_round_trip(self, security):
        user_id = uuid.uuid4()
        token = security.create_access_token(user_id)
        assert security.decode_access_token(token) == user_id

    def test_expired_token(self, security):
        token = jwt.encode(
            {"id": str(uuid.uuid4()), "exp": utcnow() - timedelta(seconds=5)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError) as exc_info:
            security.decode_access_token(token)
        assert exc_info.value.message == "Please log in again"

    def test_wrong_secret(self, security):
        token = jwt.encode({"id": str(uuid.uuid4())}, "someone-else", algorithm="HS256")
        with pytest.raises(UnauthorizedError) as exc_info:
            security.decode_access_token(token)
        assert exc_info.value.message == "Not authorized to access this route"

    def test_garbage_token(self, security):
        with pytest.raises(UnauthorizedError):
            security.decode_access_token("not-a-jwt")

    def test_missing_id_claim(self, security):
        token = jwt.encode({"sub": "someone"}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            security.decode_access_token(token)


class TestResetTokens:
    def test_generate(self, security):
        raw, digest, expires = security.generate_reset_token()
        assert len(raw) == 40
        int(raw, 16)
        assert digest == security.hash_reset_token(raw)
        assert digest != raw
        assert utcnow() < expires <= utcnow() + RESET_TOKEN_TTL
