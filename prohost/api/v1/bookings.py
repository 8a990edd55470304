"""Bookings API router.

Tenant rule: every query is scoped to the tenant resolved from the request.
A booking of another tenant behaves exactly like a booking that does not exist.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from prohost.api.deps import get_current_tenant, get_db
from prohost.config import settings
from prohost.models.booking import Booking
from prohost.models.tenant import Tenant
from prohost.reports.context import TenantContext
from prohost.reports.query import StatusGroup, bookings_for_room, bookings_within_range, query_bookings
from prohost.schemas.booking import (
    BookingBulkCreate,
    BookingBulkDelete,
    BookingBulkDeleteResponse,
    BookingCreate,
    BookingFilter,
    BookingInterval,
    BookingListResponse,
    BookingStatus,
    BookingUpdate,
)
from prohost.schemas.common import MessageResponse
from prohost.services.booking_store import fetch_bookings, find_conflicting_booking, to_interval

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])

# Fields a client may clear by sending null
_NULLABLE_FIELDS = {"guest_email", "guest_phone", "city", "notes"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _get_booking_for_tenant(
    booking_id: uuid.UUID,
    tenant: Tenant,
    db: AsyncSession,
) -> Booking:
    """Fetch a booking of the current tenant.

    Raises ``HTTPException 404`` when the booking does not exist or belongs to
    another tenant.
    """
    result = await db.execute(select(Booking).where(Booking.id == booking_id, Booking.tenant_id == tenant.id))
    booking = result.scalar_one_or_none()

    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


def _check_room(tenant: Tenant, room: str) -> None:
    """Raise 422 if ``room`` is not one of the tenant's configured rooms."""
    if room not in TenantContext.from_tenant(tenant).room_ids:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid room: {room}",
        )


async def _check_date_conflict(
    db: AsyncSession,
    tenant: Tenant,
    room: str,
    check_in: date,
    check_out: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> None:
    """Raise 409 if the stay overlaps a non-cancelled booking on the same room."""
    if not settings.reject_overlapping_bookings:
        return
    conflict = await find_conflicting_booking(db, tenant.id, room, check_in, check_out, exclude_booking_id)
    if conflict is not None:
        logger.info("Rejected stay %s..%s on room %s: overlaps booking %s", check_in, check_out, room, conflict.id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Dates conflict with an existing booking",
        )


def _check_batch_conflicts(batch: list[BookingCreate]) -> None:
    """Raise 409 if two non-cancelled stays of one import overlap on the same room."""
    if not settings.reject_overlapping_bookings:
        return
    by_room: dict[str, list[BookingCreate]] = {}
    for item in batch:
        if item.status is not BookingStatus.CANCELED:
            by_room.setdefault(item.room, []).append(item)
    for room, stays in by_room.items():
        stays.sort(key=lambda item: item.check_in)
        for previous, current in zip(stays, stays[1:]):
            if current.check_in < previous.check_out:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Imported bookings overlap on room {room}",
                )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=BookingInterval,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> BookingInterval:
    """Create a booking for one of the tenant's rooms.

    Validates that:
    - The room is configured on the tenant.
    - There are no date conflicts with existing non-cancelled bookings.
    """
    _check_room(tenant, body.room)
    if body.status is not BookingStatus.CANCELED:
        await _check_date_conflict(db, tenant, body.room, body.check_in, body.check_out)

    data = body.model_dump()
    data["status"] = body.status.value
    booking = Booking(tenant_id=tenant.id, **data)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    logger.info("Created booking %s on room %s for tenant %s", booking.id, booking.room, tenant.id)
    return to_interval(booking)


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List the tenant's bookings",
)
async def list_bookings(
    group: StatusGroup = Query(StatusGroup.ALL, description="upcoming, active, past, canceled or all"),
    search: str | None = Query(None, description="Match guest name, city or phone"),
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    room: str | None = Query(None, description="Filter by room"),
    start_date: date | None = Query(None, description="Bookings with check_in >= this date"),
    end_date: date | None = Query(None, description="Bookings with check_in <= this date"),
    guest_name: str | None = Query(None, description="Guest name contains (case-insensitive)"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Pagination limit"),
    sort_by: str = Query("check_in", pattern="^(check_in|check_out|created_at|guest_name|room|total_price)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> dict:
    """Return a filtered, sorted page of bookings plus the total match count."""
    try:
        booking_filter = BookingFilter(
            status=status_filter,
            room=room,
            start_date=start_date,
            end_date=end_date,
            guest_name=guest_name,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid status '{status_filter}'",
        ) from e

    bookings = await fetch_bookings(db, tenant.id, booking_filter)
    items, total = query_bookings(
        bookings,
        group=group,
        search=search,
        today=TenantContext.from_tenant(tenant).today(),
        limit=limit,
        offset=skip,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"items": items, "total": total}


@router.get(
    "/rooms/{room}",
    response_model=list[BookingInterval],
    summary="List bookings of one room",
)
async def list_room_bookings(
    room: str,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> list[BookingInterval]:
    """Return every booking of ``room``, newest check-in first."""
    bookings = await fetch_bookings(db, tenant.id, BookingFilter(room=room))
    return bookings_for_room(bookings, room)


@router.get(
    "/range",
    response_model=list[BookingInterval],
    summary="List bookings whose stay lies inside a date range",
)
async def list_bookings_in_range(
    start: date = Query(..., description="First day of the range"),
    end: date = Query(..., description="Last day of the range"),
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> list[BookingInterval]:
    """Return bookings checking in on or after ``start`` and out on or before ``end``."""
    bookings = await fetch_bookings(db, tenant.id, BookingFilter(start_date=start, end_date=end))
    return bookings_within_range(bookings, start, end)


@router.post(
    "/bulk",
    response_model=list[BookingInterval],
    status_code=status.HTTP_201_CREATED,
    summary="Import a batch of bookings",
)
async def bulk_create_bookings(
    body: BookingBulkCreate,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> list[BookingInterval]:
    """Store up to 1000 bookings at once.

    Every booking passes the same room and conflict checks as a single create,
    and the batch is also checked against itself. Nothing is stored unless the
    whole batch is valid.
    """
    for item in body.bookings:
        _check_room(tenant, item.room)
    _check_batch_conflicts(body.bookings)
    for item in body.bookings:
        if item.status is not BookingStatus.CANCELED:
            await _check_date_conflict(db, tenant, item.room, item.check_in, item.check_out)

    bookings = []
    for item in body.bookings:
        data = item.model_dump()
        data["status"] = item.status.value
        bookings.append(Booking(tenant_id=tenant.id, **data))
    db.add_all(bookings)
    await db.flush()
    for booking in bookings:
        await db.refresh(booking)
    logger.info("Imported %d bookings for tenant %s", len(bookings), tenant.id)
    return [to_interval(booking) for booking in bookings]


@router.delete(
    "/bulk",
    response_model=BookingBulkDeleteResponse,
    summary="Delete a batch of bookings",
)
async def bulk_delete_bookings(
    body: BookingBulkDelete,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> BookingBulkDeleteResponse:
    """Delete the listed bookings of the current tenant and report how many went."""
    result = await db.execute(delete(Booking).where(Booking.tenant_id == tenant.id, Booking.id.in_(body.ids)))
    await db.flush()
    logger.info("Deleted %d of %d requested bookings for tenant %s", result.rowcount, len(body.ids), tenant.id)
    return BookingBulkDeleteResponse(deleted=result.rowcount)


@router.get(
    "/{booking_id}",
    response_model=BookingInterval,
    summary="Get a single booking",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> BookingInterval:
    booking = await _get_booking_for_tenant(booking_id, tenant, db)
    return to_interval(booking)


@router.put(
    "/{booking_id}",
    response_model=BookingInterval,
    summary="Update a booking",
)
async def update_booking(
    booking_id: uuid.UUID,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> BookingInterval:
    """Partially update a booking; this is also how a booking is rescheduled or canceled.

    Re-runs date conflict detection when the stay, room or status changes and
    the booking is not canceled afterwards.
    """
    booking = await _get_booking_for_tenant(booking_id, tenant, db)

    update_data = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if "status" in update_data:
        update_data["status"] = update_data["status"].value

    effective_check_in = update_data.get("check_in", booking.check_in)
    effective_check_out = update_data.get("check_out", booking.check_out)
    effective_room = update_data.get("room", booking.room)
    effective_status = update_data.get("status", booking.status)

    if effective_check_out <= effective_check_in:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="check_out must be after check_in",
        )

    if "room" in update_data:
        _check_room(tenant, effective_room)

    stay_changed = bool(update_data.keys() & {"check_in", "check_out", "room", "status"})
    if stay_changed and effective_status != BookingStatus.CANCELED.value:
        await _check_date_conflict(
            db,
            tenant,
            effective_room,
            effective_check_in,
            effective_check_out,
            exclude_booking_id=booking.id,
        )

    # Apply updates
    for field, value in update_data.items():
        setattr(booking, field, value)

    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    return to_interval(booking)


@router.delete(
    "/{booking_id}",
    response_model=MessageResponse,
    summary="Delete a booking",
)
async def delete_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> dict:
    """Remove a booking permanently. Canceling keeps it; deleting does not."""
    booking = await _get_booking_for_tenant(booking_id, tenant, db)

    await db.delete(booking)
    await db.flush()
    logger.info("Deleted booking %s for tenant %s", booking_id, tenant.id)
    return {"message": "Booking deleted"}
