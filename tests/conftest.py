"""Shared test configuration and fixtures.

Database tests run against a fresh in-memory SQLite database per test
(``aiosqlite``), so no external server is needed and every test starts empty.
Engine tests use plain ``BookingInterval`` values built with ``make_booking``.
"""

import itertools
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import date, datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from prohost.database import Base, get_db
from prohost.main import app
from prohost.models.booking import Booking
from prohost.models.tenant import Tenant
from prohost.schemas.booking import BookingInterval

_TEST_DB_URL = "sqlite+aiosqlite://"

TENANT_ROOMS = [
    {"id": "r1", "name": "Sea View"},
    {"id": "r2", "name": "Garden"},
    {"id": "r3", "name": "Attic"},
]


# ---------------------------------------------------------------------------
# Engine fixtures: in-memory booking values
# ---------------------------------------------------------------------------


@pytest.fixture
def make_booking() -> Callable[..., BookingInterval]:
    """Return a factory for ``BookingInterval`` values with sensible defaults.

    Dates may be given as ISO strings; ``created_at`` defaults to midnight of
    the check-in day.
    """
    counter = itertools.count(1)

    def _make(
        check_in: str | date = "2026-03-10",
        check_out: str | date = "2026-03-13",
        room: str = "r1",
        night_price: str | Decimal = "100",
        deposit: str | Decimal = "0",
        status: str = "UPCOMING",
        created_at: str | datetime | None = None,
        **extra,
    ) -> BookingInterval:
        check_in = date.fromisoformat(check_in) if isinstance(check_in, str) else check_in
        if created_at is None:
            created_at = datetime.combine(check_in, datetime.min.time())
        return BookingInterval(
            id=next(counter),
            tenant_id="tenant-1",
            room=room,
            check_in=check_in,
            check_out=check_out,
            night_price=Decimal(night_price),
            deposit=Decimal(deposit),
            status=status,
            created_at=created_at,
            guest_name=extra.pop("guest_name", "Guest"),
            **extra,
        )

    return _make


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory database with every table, disposed after the test."""
    engine = create_async_engine(
        _TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: tenants and stored bookings
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_tenant(db_session: AsyncSession) -> Tenant:
    """Create a tenant with three rooms directly in the DB."""
    tenant = Tenant(
        name="Test Guesthouse",
        email=f"owner-{uuid.uuid4().hex[:8]}@test.com",
        timezone="Europe/Rome",
        currency="EUR",
        rooms=TENANT_ROOMS,
    )
    db_session.add(tenant)
    await db_session.flush()
    await db_session.refresh(tenant)
    return tenant


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    """Create a second tenant for isolation tests."""
    tenant = Tenant(name="Other Hostel", rooms=[{"id": "r1", "name": "Dorm"}])
    db_session.add(tenant)
    await db_session.flush()
    await db_session.refresh(tenant)
    return tenant


@pytest.fixture
def tenant_headers(test_tenant: Tenant) -> dict[str, str]:
    """Return the headers that scope a request to the test tenant."""
    return {"X-Tenant-ID": str(test_tenant.id)}


@pytest.fixture
def add_booking(db_session: AsyncSession) -> Callable:
    """Return an async helper that stores a booking row and returns it."""

    async def _add(
        tenant: Tenant,
        check_in: str,
        check_out: str,
        room: str = "r1",
        night_price: str = "100",
        deposit: str = "0",
        status: str = "UPCOMING",
        created_at: datetime | None = None,
        guest_name: str = "Stored Guest",
        **extra,
    ) -> Booking:
        booking = Booking(
            tenant_id=tenant.id,
            guest_name=guest_name,
            room=room,
            check_in=date.fromisoformat(check_in),
            check_out=date.fromisoformat(check_out),
            night_price=Decimal(night_price),
            deposit=Decimal(deposit),
            status=status,
            created_at=created_at or datetime.fromisoformat(check_in),
            **extra,
        )
        db_session.add(booking)
        await db_session.flush()
        await db_session.refresh(booking)
        return booking

    return _add
