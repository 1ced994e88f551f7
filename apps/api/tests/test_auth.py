"""Tests for registration, password sign-in and session endpoints."""

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.deps import COOKIE_NAME
from app.db.enums import VerificationStatus
from app.db.models import Organization, User


def _registration(**user_overrides) -> dict:
    user = {
        "name": "Alex Admin",
        "email": "alex@hope-ngo.org",
        "role": "ngo_admin",
        "phone": "+1-555-0100",
        "password": "a-strong-password",
    }
    user.update(user_overrides)
    return {
        "organization": {
            "name": "Hope NGO",
            "type": "ngo",
            "contact_email": "contact@hope-ngo.org",
            "contact_phone": "+1-555-0101",
            "address": "1 Main St",
        },
        "user": user,
    }


# =============================================================================
# Registration
# =============================================================================

@pytest.mark.asyncio
async def test_register_creates_pending_org_and_unverified_user(client: AsyncClient, db):
    payload = _registration()
    payload["organization"]["verification_status"] = "verified"  # ignored

    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["organization"]["verification_status"] == "pending"
    assert data["user"]["is_verified"] is False
    assert data["user"]["organization_id"] == data["organization"]["id"]
    assert "password_hash" not in data["user"]

    user = db.query(User).filter(User.email == "alex@hope-ngo.org").one()
    assert user.password_hash and user.password_hash != "a-strong-password"
    org = db.query(Organization).one()
    assert org.verification_status == VerificationStatus.PENDING.value


@pytest.mark.asyncio
async def test_register_lowercases_email(client: AsyncClient):
    response = await client.post(
        "/auth/register", json=_registration(email="  Alex@Hope-NGO.org ")
    )
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "alex@hope-ngo.org"


@pytest.mark.asyncio
async def test_register_duplicate_email_rejected(client: AsyncClient, db):
    first = await client.post("/auth/register", json=_registration())
    assert first.status_code == 201

    second = _registration()
    second["organization"]["contact_email"] = "other@hope-ngo.org"
    response = await client.post("/auth/register", json=second)

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already exists"
    # Nothing from the failed attempt was written
    assert db.query(Organization).count() == 1


@pytest.mark.asyncio
async def test_register_duplicate_email_differs_only_in_case(client: AsyncClient):
    await client.post("/auth/register", json=_registration())

    second = _registration(email="ALEX@hope-ngo.org")
    second["organization"]["contact_email"] = "other@hope-ngo.org"
    response = await client.post("/auth/register", json=second)

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already exists"


@pytest.mark.asyncio
async def test_register_missing_field_names_it(client: AsyncClient):
    payload = _registration()
    payload["organization"]["name"] = ""

    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required field: organization.name"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", "public", "superuser"])
async def test_register_rejects_roles_outside_registration_set(client: AsyncClient, role):
    response = await client.post("/auth/register", json=_registration(role=role))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_register_rejects_unknown_org_type(client: AsyncClient):
    payload = _registration()
    payload["organization"]["type"] = "church"

    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 400


# =============================================================================
# Sign-in
# =============================================================================

@pytest.mark.asyncio
async def test_login_sets_session_cookie(client: AsyncClient, test_user):
    response = await client.post(
        "/auth/login",
        json={"email": test_user.email.upper(), "password": "correct-horse-battery"},
    )

    assert response.status_code == 200
    assert response.json()["user_id"] == str(test_user.id)
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert f"Max-Age={7 * 24 * 3600}" in set_cookie


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post(
        "/auth/login", json={"email": test_user.email, "password": "nope"}
    )
    assert response.status_code == 401
    assert COOKIE_NAME not in response.cookies


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient, db):
    response = await client.post(
        "/auth/login", json={"email": "nobody@test.com", "password": "whatever"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_requires_email_and_password(client: AsyncClient, db):
    response = await client.post("/auth/login", json={"email": "a@test.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Email and password are required"


@pytest.mark.asyncio
async def test_demo_password_policy_only_when_enabled(client: AsyncClient, test_user, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_ALLOW_ANY_PASSWORD", True)

    response = await client.post(
        "/auth/login", json={"email": test_user.email, "password": "anything"}
    )
    assert response.status_code == 200

    monkeypatch.setattr(settings, "ENV", "production")
    response = await client.post(
        "/auth/login", json={"email": test_user.email, "password": "anything"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unverified_login_blocked_when_required(client: AsyncClient, test_user, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_VERIFIED_LOGIN", True)

    response = await client.post(
        "/auth/login",
        json={"email": test_user.email, "password": "correct-horse-battery"},
    )
    assert response.status_code == 403


# =============================================================================
# Session
# =============================================================================

@pytest.mark.asyncio
async def test_protected_endpoint_requires_session(client: AsyncClient):
    """/auth/me requires a session."""
    response = await client.get("/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_authed_me_returns_user(authed_client: AsyncClient, test_user, test_org):
    response = await authed_client.get("/auth/me")

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == test_user.email
    assert data["role"] == "ngo_admin"
    assert data["org_name"] == test_org.name


@pytest.mark.asyncio
async def test_me_with_forged_cookie(client: AsyncClient, db):
    client.cookies.set(COOKIE_NAME, "forged-token")
    response = await client.get("/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_requires_csrf_header(authed_client: AsyncClient):
    response = await authed_client.post(
        "/auth/logout", headers={"X-Requested-With": ""}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_logout_clears_cookie(authed_client: AsyncClient):
    response = await authed_client.post("/auth/logout")

    assert response.status_code == 200
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f'{COOKIE_NAME}=""') or "Max-Age=0" in set_cookie
