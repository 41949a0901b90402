"""
DevCamper API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets its own app built by `create_app()` on a fresh SQLite
       file database, with the geocoder and mailer replaced on `app.state`
       by in-memory fakes. Requests go through httpx's ASGITransport, so no
       server or network is involved.

Fixture Hierarchy (all function-scoped):
    settings ─► app ─► client          HTTP access to the app
                   └─► db              a session for arranging/inspecting rows
    make_user, make_bootcamp           insert rows directly
    auth_headers                       bearer header for a user

ASGITransport does not run the lifespan, so the `app` fixture creates the
schema and disposes the engine itself.
"""

import uuid
from typing import Any, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from devcamper.config import Settings
from devcamper.database import create_schema, dispose_engine
from devcamper.exceptions import EmailDeliveryError
from devcamper.main import create_app
from devcamper.models import Bootcamp, User
from devcamper.services.geocoder import Geocoder, GeocodeResult

DEFAULT_PASSWORD = "123456"

BOSTON = GeocodeResult(
    latitude=42.3601,
    longitude=-71.0589,
    formatted_address="233 Bay State Rd, Boston, MA 02215, US",
    street="233 Bay State Rd",
    city="Boston",
    state="MA",
    zipcode="02215",
    country="US",
)


# ══════════════════════════════════════════════════════════════════════════
# Fakes
# ══════════════════════════════════════════════════════════════════════════

class FakeGeocoder(Geocoder):
    """Returns canned results; unknown queries resolve to Boston."""

    provider = "fake"

    def __init__(self, results: Optional[Dict[str, GeocodeResult]] = None):
        super().__init__()
        self.results = results or {}
        self.queries: List[str] = []

    async def geocode(self, query: str) -> GeocodeResult:
        self.queries.append(query)
        return self.results.get(query, BOSTON)


class FakeMailer:
    """Records messages instead of sending them; `fail=True` simulates SMTP errors."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def send(self, to: str, subject: str, text: str) -> None:
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append({"to": to, "subject": subject, "text": text})


# ══════════════════════════════════════════════════════════════════════════
# App & Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret-not-for-production",
        bcrypt_rounds=4,
        file_upload_path=str(tmp_path / "uploads"),
        max_file_upload=1000,
        environment="test",
        log_level="WARNING",
        rate_limit_requests=10_000,
        geocoder_provider="openstreetmap",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await create_schema(application.state.engine)
    application.state.geocoder = FakeGeocoder()
    application.state.mailer = FakeMailer()
    yield application
    await dispose_engine(application.state.engine)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db(app):
    async with app.state.session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Row factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(app) -> Callable[..., Any]:
    """
    Insert a user and return it.

    Usage:
        publisher = await make_user(role="publisher")
    """

    async def _make_user(
        role: str = "user",
        email: Optional[str] = None,
        name: str = "Test User",
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = User(
            name=name,
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@devcamper.io",
            role=role,
            password=app.state.security.hash_password(password),
        )
        async with app.state.session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_bootcamp(app) -> Callable[..., Any]:
    """Insert a geocoded bootcamp owned by `owner`; keyword overrides set columns."""

    async def _make_bootcamp(owner: User, **overrides: Any) -> Bootcamp:
        name = overrides.pop("name", f"Bootcamp {uuid.uuid4().hex[:6]}")
        values = dict(
            name=name,
            slug=name.lower().replace(" ", "-"),
            description="A bootcamp for testing",
            careers=["Web Development"],
            user_id=owner.id,
            **BOSTON.as_columns(),
        )
        values.update(overrides)
        bootcamp = Bootcamp(**values)
        async with app.state.session_factory() as session:
            session.add(bootcamp)
            await session.commit()
        return bootcamp

    return _make_bootcamp


@pytest.fixture
def auth_headers(app) -> Callable[[User], Dict[str, str]]:
    def _auth_headers(user: User) -> Dict[str, str]:
        token = app.state.security.create_access_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def bootcamp_payload() -> Dict[str, Any]:
    return {
        "name": "Devworks Bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.io",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "jobAssistance": True,
        "jobGuarantee": False,
        "acceptGi": True,
    }


@pytest.fixture
def course_payload() -> Dict[str, Any]:
    return {
        "title": "Front End Web Development",
        "description": "HTML, CSS, JavaScript and React",
        "weeks": 8,
        "tuition": 8000,
        "minimumSkill": "beginner",
        "scholarshipAvailable": True,
    }
