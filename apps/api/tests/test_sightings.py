"""Tests for public sighting reports."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.core.errors import StorageError, ValidationError
from app.db.enums import Role
from app.db.models import Sighting
from app.schemas.sighting import SightingCreate
from app.services import sighting_service

REPORTER_FIELDS = {"reporter_name", "reporter_email", "reporter_phone"}


def _sighting_payload(case_id, **overrides) -> dict:
    payload = {
        "case_id": str(case_id),
        "reporter_name": "Pat Walker",
        "reporter_email": "pat@example.com",
        "reporter_phone": "+1-555-0199",
        "sighting_location": "Harbor front",
        "sighting_date": "2026-10-12",
        "sighting_time": "14:30",
        "description": "Child matching the photo near the ferry",
        "confidence_level": 4,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Create
# =============================================================================

@pytest.mark.asyncio
async def test_anonymous_sighting_is_pending(client: AsyncClient, db, test_case):
    response = await client.post("/sightings", json=_sighting_payload(test_case.id))

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["case_id"] == str(test_case.id)
    assert REPORTER_FIELDS.isdisjoint(data)

    stored = db.query(Sighting).one()
    assert stored.reporter_phone == "+1-555-0199"


@pytest.mark.asyncio
@pytest.mark.parametrize("level,expected", [(1, 1), (5, 5), ("3", 3), (None, None)])
async def test_confidence_level_accepted(client: AsyncClient, test_case, level, expected):
    response = await client.post(
        "/sightings", json=_sighting_payload(test_case.id, confidence_level=level)
    )
    assert response.status_code == 201
    assert response.json()["confidence_level"] == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("level", [0, 6, "abc", "-2"])
async def test_confidence_level_out_of_range_rejected(client: AsyncClient, db, test_case, level):
    response = await client.post(
        "/sightings", json=_sighting_payload(test_case.id, confidence_level=level)
    )

    assert response.status_code == 400
    assert db.query(Sighting).count() == 0


@pytest.mark.asyncio
async def test_missing_reporter_phone_names_field(client: AsyncClient, db, test_case):
    payload = _sighting_payload(test_case.id)
    del payload["reporter_phone"]

    response = await client.post("/sightings", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required field: reporter_phone"
    assert db.query(Sighting).count() == 0


@pytest.mark.asyncio
async def test_sighting_for_unknown_case_rejected(client: AsyncClient, db):
    response = await client.post("/sightings", json=_sighting_payload(uuid.uuid4()))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_sighting_with_malformed_case_id_rejected(client: AsyncClient, db):
    response = await client.post("/sightings", json=_sighting_payload("12"))
    assert response.status_code == 400


def test_parse_confidence_level_rejects_bool():
    with pytest.raises(ValidationError):
        sighting_service.parse_confidence_level(True)


@pytest.mark.asyncio
@pytest.mark.parametrize("level", [True, False])
async def test_boolean_confidence_level_rejected(client: AsyncClient, db, test_case, level):
    response = await client.post(
        "/sightings", json=_sighting_payload(test_case.id, confidence_level=level)
    )

    assert response.status_code == 400
    assert db.query(Sighting).count() == 0


def test_create_sighting_reload_failure_is_storage_error(db, test_case, monkeypatch):
    def _boom(*_args, **_kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    monkeypatch.setattr(db, "refresh", _boom)

    with pytest.raises(StorageError):
        sighting_service.create_sighting(
            db, SightingCreate(**_sighting_payload(test_case.id))
        )


def test_create_sighting_storage_failure_propagates(db, test_case, monkeypatch):
    def _boom():
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db, "commit", _boom)

    with pytest.raises(StorageError):
        sighting_service.create_sighting(
            db, SightingCreate(**_sighting_payload(test_case.id))
        )


@pytest.mark.asyncio
async def test_storage_failure_returns_generic_error(client: AsyncClient, db, test_case, monkeypatch):
    def _boom():
        raise OperationalError("INSERT", {}, Exception("constraint detail"))

    monkeypatch.setattr(db, "commit", _boom)

    response = await client.post("/sightings", json=_sighting_payload(test_case.id))

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to create sighting"


# =============================================================================
# List
# =============================================================================

@pytest.mark.asyncio
async def test_public_listing_hides_reporter_details(client: AsyncClient, test_case):
    await client.post("/sightings", json=_sighting_payload(test_case.id))

    response = await client.get(f"/cases/{test_case.id}/sightings")

    assert response.status_code == 200
    items = response.json()
    assert len(items) == 1
    assert REPORTER_FIELDS.isdisjoint(items[0])


@pytest.mark.asyncio
async def test_owning_org_sees_reporter_details(authed_client: AsyncClient, test_case):
    await authed_client.post("/sightings", json=_sighting_payload(test_case.id))

    response = await authed_client.get(f"/cases/{test_case.id}/sightings")

    item = response.json()[0]
    assert item["reporter_email"] == "pat@example.com"
    assert item["reporter_phone"] == "+1-555-0199"


@pytest.mark.asyncio
async def test_other_org_staff_do_not_see_reporter_details(
    client_for, test_case, org_factory, user_factory, auth_factory
):
    outsider = user_factory(org_factory(name="Other NGO"), role=Role.NGO_MEMBER)

    async with client_for(auth_factory(outsider)) as c:
        await c.post("/sightings", json=_sighting_payload(test_case.id))
        response = await c.get(f"/cases/{test_case.id}/sightings")

    assert REPORTER_FIELDS.isdisjoint(response.json()[0])


@pytest.mark.asyncio
async def test_sightings_for_unknown_case_is_empty(client: AsyncClient, db):
    response = await client.get(f"/cases/{uuid.uuid4()}/sightings")
    assert response.status_code == 200
    assert response.json() == []


def test_list_sightings_newest_first(db, test_case):
    first = sighting_service.create_sighting(db, SightingCreate(**_sighting_payload(test_case.id)))
    second = sighting_service.create_sighting(db, SightingCreate(**_sighting_payload(test_case.id)))
    first.created_at = second.created_at.replace(year=2025)
    db.commit()

    listed = sighting_service.list_sightings_by_case(db, test_case.id)

    assert [s.id for s in listed] == [second.id, first.id]


def test_list_sightings_degrades_to_empty(db, test_case, monkeypatch):
    assert sighting_service.list_sightings_by_case(db, "garbage") == []

    def _boom(*_args, **_kwargs):
        raise OperationalError("SELECT", {}, Exception("db down"))

    monkeypatch.setattr(db, "query", _boom)
    assert sighting_service.list_sightings_by_case(db, test_case.id) == []
