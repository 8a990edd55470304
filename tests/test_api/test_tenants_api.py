"""Tests for tenant settings and room list endpoints."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# POST /api/v1/tenants
# ---------------------------------------------------------------------------


class TestCreateTenant:
    async def test_create_success(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/tenants",
            json={
                "name": "Casa Mare",
                "timezone": "Europe/Lisbon",
                "currency": "eur",
                "rooms": [{"id": "A", "name": "Azul"}, {"id": "B", "name": "Branco"}],
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Casa Mare"
        assert data["currency"] == "EUR"
        assert data["rooms"] == [{"id": "A", "name": "Azul"}, {"id": "B", "name": "Branco"}]

        me = await client.get("/api/v1/tenants/me", headers={"X-Tenant-ID": data["id"]})
        assert me.status_code == 200
        assert me.json()["timezone"] == "Europe/Lisbon"

    async def test_create_name_taken(self, client: AsyncClient, test_tenant) -> None:
        response = await client.post("/api/v1/tenants", json={"name": "Test Guesthouse"})
        assert response.status_code == 409
        assert response.json()["detail"] == "Name already taken"

    async def test_create_duplicate_room_names(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/tenants",
            json={"name": "Twin", "rooms": [{"id": "1", "name": "Suite"}, {"id": "2", "name": "Suite"}]},
        )
        assert response.status_code == 422

    async def test_create_unknown_timezone(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/tenants", json={"name": "Nowhere", "timezone": "Mars/Olympus"})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# GET / PUT /api/v1/tenants/me
# ---------------------------------------------------------------------------


class TestCurrentTenant:
    async def test_get(self, client: AsyncClient, tenant_headers: dict, test_tenant) -> None:
        response = await client.get("/api/v1/tenants/me", headers=tenant_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(test_tenant.id)
        assert [room["id"] for room in data["rooms"]] == ["r1", "r2", "r3"]

    async def test_get_unknown_tenant(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tenants/me", headers={"X-Tenant-ID": str(uuid.uuid4())})
        assert response.status_code == 404

    async def test_update(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.put(
            "/api/v1/tenants/me",
            json={"name": "Renamed Guesthouse", "currency": "usd", "timezone": "America/New_York"},
            headers=tenant_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed Guesthouse"
        assert data["currency"] == "USD"
        assert data["timezone"] == "America/New_York"
        assert len(data["rooms"]) == 3

    async def test_update_keeping_own_name(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.put("/api/v1/tenants/me", json={"name": "Test Guesthouse"}, headers=tenant_headers)
        assert response.status_code == 200

    async def test_update_name_taken(self, client: AsyncClient, tenant_headers: dict, other_tenant) -> None:
        response = await client.put("/api/v1/tenants/me", json={"name": "Other Hostel"}, headers=tenant_headers)
        assert response.status_code == 409
        assert response.json()["detail"] == "Name already taken"

    async def test_update_invalid_currency(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.put("/api/v1/tenants/me", json={"currency": "euro"}, headers=tenant_headers)
        assert response.status_code == 422

    async def test_currency_change_reaches_reports(self, client: AsyncClient, tenant_headers: dict) -> None:
        await client.put("/api/v1/tenants/me", json={"currency": "CHF"}, headers=tenant_headers)
        response = await client.get(
            "/api/v1/reports/summary",
            params={"start": "2026-03-01", "end": "2026-03-31"},
            headers=tenant_headers,
        )
        assert response.json()["currency"] == "CHF"


# ---------------------------------------------------------------------------
# POST / DELETE /api/v1/tenants/me/rooms
# ---------------------------------------------------------------------------


class TestRooms:
    async def test_add_room(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.post("/api/v1/tenants/me/rooms", json={"name": "Loft"}, headers=tenant_headers)
        assert response.status_code == 201
        rooms = response.json()["rooms"]
        assert [room["name"] for room in rooms] == ["Sea View", "Garden", "Attic", "Loft"]
        assert rooms[-1]["id"].startswith("R")

    async def test_added_room_accepts_bookings(self, client: AsyncClient, tenant_headers: dict) -> None:
        await client.post("/api/v1/tenants/me/rooms", json={"id": "r4", "name": "Loft"}, headers=tenant_headers)
        response = await client.post(
            "/api/v1/bookings",
            json={
                "guest_name": "Marco Verdi",
                "room": "r4",
                "check_in": "2026-03-10",
                "check_out": "2026-03-12",
                "night_price": "90",
            },
            headers=tenant_headers,
        )
        assert response.status_code == 201

    async def test_add_duplicate_name(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.post("/api/v1/tenants/me/rooms", json={"name": "Garden"}, headers=tenant_headers)
        assert response.status_code == 409
        assert response.json()["detail"] == "Room name already exists"

    async def test_add_duplicate_id(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.post(
            "/api/v1/tenants/me/rooms", json={"id": "r1", "name": "Cellar"}, headers=tenant_headers
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Room id already exists"

    async def test_remove_room(self, client: AsyncClient, tenant_headers: dict, test_tenant, add_booking) -> None:
        booking = await add_booking(test_tenant, "2026-03-10", "2026-03-12", room="r2")

        response = await client.delete("/api/v1/tenants/me/rooms/r2", headers=tenant_headers)
        assert response.status_code == 200
        assert [room["id"] for room in response.json()["rooms"]] == ["r1", "r3"]

        # The booking survives, but the room no longer takes new ones
        kept = await client.get(f"/api/v1/bookings/{booking.id}", headers=tenant_headers)
        assert kept.status_code == 200
        created = await client.post(
            "/api/v1/bookings",
            json={
                "guest_name": "Marco Verdi",
                "room": "r2",
                "check_in": "2026-04-10",
                "check_out": "2026-04-12",
                "night_price": "90",
            },
            headers=tenant_headers,
        )
        assert created.status_code == 422

    async def test_remove_unknown_room(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.delete("/api/v1/tenants/me/rooms/r9", headers=tenant_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Room not found"
