"""Booking store — tenant-scoped reads that hand validated snapshots to the report engine.

Rows are converted to ``BookingInterval`` here and nowhere else, so every
computation downstream works on validated, immutable values.
"""

import logging
import uuid
from datetime import date

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from prohost.models.booking import Booking
from prohost.models.tenant import Tenant
from prohost.reports.context import TenantContext
from prohost.reports.intervals import month_bounds
from prohost.schemas.booking import BookingFilter, BookingInterval, BookingStatus
from prohost.schemas.report import ReportBasis

logger = logging.getLogger(__name__)


def to_interval(row: Booking) -> BookingInterval:
    """Validate one stored booking into the engine's entity type."""
    return BookingInterval.model_validate(row)


async def get_tenant(db: AsyncSession, tenant_id: uuid.UUID) -> Tenant | None:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    return result.scalar_one_or_none()


async def get_tenant_context(db: AsyncSession, tenant_id: uuid.UUID) -> TenantContext | None:
    """Load the tenant and return its report context, or None if it does not exist."""
    tenant = await get_tenant(db, tenant_id)
    if tenant is None:
        return None
    return TenantContext.from_tenant(tenant)


def _tenant_bookings(tenant_id: uuid.UUID) -> Select:
    return select(Booking).where(Booking.tenant_id == tenant_id)


async def _materialize(db: AsyncSession, query: Select) -> list[BookingInterval]:
    result = await db.execute(query)
    return [to_interval(row) for row in result.scalars().all()]


async def fetch_bookings(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    booking_filter: BookingFilter | None = None,
) -> list[BookingInterval]:
    """Return the tenant's bookings matching ``booking_filter``, oldest check-in first.

    Applies the same rules as ``prohost.reports.query.apply_filter``, in SQL.
    """
    query = _tenant_bookings(tenant_id)

    if booking_filter is not None:
        if booking_filter.status is not None:
            query = query.where(Booking.status == booking_filter.status.value)
        if booking_filter.room is not None:
            query = query.where(Booking.room == booking_filter.room)
        if booking_filter.start_date is not None:
            query = query.where(Booking.check_in >= booking_filter.start_date)
        if booking_filter.end_date is not None:
            query = query.where(Booking.check_in <= booking_filter.end_date)
        if booking_filter.guest_name:
            query = query.where(Booking.guest_name.icontains(booking_filter.guest_name, autoescape=True))

    bookings = await _materialize(db, query.order_by(Booking.check_in))
    logger.debug("Fetched %d bookings for tenant %s", len(bookings), tenant_id)
    return bookings


async def fetch_bookings_in_range(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    start: date,
    end: date,
) -> list[BookingInterval]:
    """Return bookings whose stay overlaps the inclusive window ``[start, end]``."""
    if end < start:
        return []
    query = _tenant_bookings(tenant_id).where(
        Booking.check_in <= end,
        Booking.check_out > start,
    )
    bookings = await _materialize(db, query.order_by(Booking.check_in))
    logger.debug("Fetched %d bookings for tenant %s in %s..%s", len(bookings), tenant_id, start, end)
    return bookings


async def fetch_report_bookings(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    start: date,
    end: date,
    basis: ReportBasis,
) -> list[BookingInterval]:
    """Return the snapshot a summary report over ``[start, end]`` needs.

    Monthly figures cover whole boundary months, so stay-based reports fetch
    every stay touching those months. Creation-based reports may count a
    booking whose stay lies anywhere, so they fetch the whole collection.
    """
    if end < start:
        return []
    if basis is ReportBasis.CREATED:
        return await fetch_bookings(db, tenant_id)
    span_start, _ = month_bounds(start.year, start.month)
    _, span_end = month_bounds(end.year, end.month)
    return await fetch_bookings_in_range(db, tenant_id, span_start, span_end)


async def find_conflicting_booking(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    room: str,
    check_in: date,
    check_out: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> Booking | None:
    """Return a non-canceled booking on ``room`` overlapping ``[check_in, check_out)``, if any."""
    query = _tenant_bookings(tenant_id).where(
        Booking.room == room,
        Booking.status != BookingStatus.CANCELED.value,
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query.limit(1))
    return result.scalars().first()
