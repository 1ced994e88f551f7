"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, tables created and dropped per test
- Organizations, users and session tokens for authenticated tests
- HTTPX AsyncClient with proper headers
- In-memory image generation for photo upload tests
"""
import io
import os
import tempfile
import uuid
from dataclasses import dataclass
from datetime import date
from typing import AsyncGenerator, Callable, Generator

# Settings are read at import time, so configure the environment first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "dev"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOCAL_STORAGE_PATH"] = tempfile.mkdtemp(prefix="findthem-test-media-")

import pytest
from httpx import AsyncClient, ASGITransport
from PIL import Image
from sqlalchemy.orm import Session

from app.main import app
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.core.deps import get_db, COOKIE_NAME
from app.core.security import create_session_token, hash_password
from app.db.enums import OrganizationType, Role, VerificationStatus
from app.db.models import Case, Organization, User
from app.schemas.case import CaseCreate
from app.services import case_service

TEST_PASSWORD = "correct-horse-battery"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    The in-memory engine uses a single shared connection, so app code
    can commit freely; dropping the tables resets everything.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def create_org(
    db: Session,
    name: str = "Test Organization",
    org_type: OrganizationType = OrganizationType.NGO,
    status: VerificationStatus = VerificationStatus.VERIFIED,
) -> Organization:
    org = Organization(
        name=name,
        type=org_type.value,
        contact_email=f"org-{uuid.uuid4().hex[:8]}@test.com",
        verification_status=status.value,
    )
    db.add(org)
    db.commit()
    return org


def create_user(
    db: Session,
    org: Organization | None,
    role: Role = Role.NGO_ADMIN,
    password: str | None = TEST_PASSWORD,
) -> User:
    user = User(
        email=f"test-{uuid.uuid4().hex[:8]}@test.com",
        name="Test User",
        role=role.value,
        organization_id=org.id if org else None,
        password_hash=hash_password(password) if password else None,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture(scope="function")
def org_factory(db: Session) -> Callable[..., Organization]:
    """Create extra organizations: org_factory(name=..., org_type=..., status=...)."""
    return lambda **kwargs: create_org(db, **kwargs)


@pytest.fixture(scope="function")
def user_factory(db: Session) -> Callable[..., User]:
    """Create extra users: user_factory(org, role=..., password=...)."""
    return lambda org=None, **kwargs: create_user(db, org, **kwargs)


@pytest.fixture(scope="function")
def test_org(db: Session) -> Organization:
    """Create a verified test organization."""
    return create_org(db)


@pytest.fixture(scope="function")
def test_user(db: Session, test_org: Organization) -> User:
    """Create an NGO admin in test_org with a known password."""
    return create_user(db, test_org)


@pytest.fixture(scope="function")
def test_case(db: Session, test_org: Organization, test_user: User) -> Case:
    """Create an active case owned by test_org."""
    return case_service.create_case(
        db,
        test_org.id,
        test_user.id,
        CaseCreate(
            child_name="Jamie Doe",
            age=9,
            gender="female",
            description="Red jacket, blue backpack",
            last_seen_location="Central Park",
            last_seen_date=date(2026, 10, 1),
        ),
    )


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    __test__ = False

    user: User
    org: Organization | None
    token: str
    cookie_name: str = COOKIE_NAME


def make_auth(user: User) -> TestAuth:
    token = create_session_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        org_id=user.organization_id,
    )
    return TestAuth(user=user, org=user.organization, token=token)


@pytest.fixture(scope="function")
def auth_factory() -> Callable[[User], TestAuth]:
    """Mint a session token for any user."""
    return make_auth


@pytest.fixture(scope="function")
def test_auth(test_user: User) -> TestAuth:
    """Create a session token for test_user."""
    return make_auth(test_user)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public endpoints.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client_for(db: Session) -> Callable[[TestAuth], AsyncClient]:
    """
    Factory for AsyncClients authenticated as a given user.

    Callers are responsible for using the client as a context manager.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    def _make(auth: TestAuth) -> AsyncClient:
        return AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            cookies={auth.cookie_name: auth.token},
            headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
        )

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated AsyncClient with session cookie and CSRF header.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# Images
# =============================================================================

@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Return a factory producing encoded solid-colour (or two-tone) images."""
    def _make(
        color: tuple[int, int, int] = (200, 30, 30),
        size: tuple[int, int] = (32, 32),
        fmt: str = "PNG",
        second_color: tuple[int, int, int] | None = None,
    ) -> bytes:
        image = Image.new("RGB", size, color)
        if second_color is not None:
            half = Image.new("RGB", (size[0] // 2, size[1]), second_color)
            image.paste(half, (0, 0))
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make
