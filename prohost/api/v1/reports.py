"""Reports API router — occupancy, fill rate, revenue and guest statistics."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from prohost.api.deps import get_current_tenant, get_db
from prohost.models.tenant import Tenant
from prohost.reports.context import TenantContext
from prohost.reports.intervals import month_bounds
from prohost.reports.rollup import build_report, month_occupancy
from prohost.reports.statistics import guest_statistics, revenue_report
from prohost.schemas.report import (
    ALL_ROOMS,
    GuestStatistics,
    MonthOccupancyReport,
    ReportBasis,
    ReportSummary,
    RevenueReport,
)
from prohost.services.booking_store import fetch_bookings, fetch_bookings_in_range, fetch_report_bookings

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
async def get_report_summary(
    start: date = Query(..., description="First day of the report window"),
    end: date = Query(..., description="Last day of the report window (inclusive)"),
    room: str = Query(ALL_ROOMS, description="Room id, or ALL for every room"),
    basis: ReportBasis = Query(ReportBasis.STAY, description="Bucket bookings by stay date or creation date"),
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> ReportSummary:
    """Per-room totals and per-month revenue and fill rate over a window.

    A window whose end precedes its start returns an empty report rather than
    an error. An unknown room matches no bookings.
    """
    context = TenantContext.from_tenant(tenant)
    bookings = await fetch_report_bookings(db, tenant.id, start, end, basis)
    return build_report(bookings, context, start, end, room, basis)


@router.get("/occupancy", response_model=MonthOccupancyReport)
async def get_occupancy_report(
    year: int = Query(..., ge=1, le=9999, description="Calendar year"),
    month: int = Query(..., ge=1, le=12, description="Calendar month (1-12)"),
    room: str | None = Query(None, description="Restrict to one room"),
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> MonthOccupancyReport:
    """Occupied nights against room capacity for one calendar month."""
    context = TenantContext.from_tenant(tenant)
    month_first, month_last = month_bounds(year, month)
    bookings = await fetch_bookings_in_range(db, tenant.id, month_first, month_last)
    return month_occupancy(bookings, context.room_ids, year, month, room)


@router.get("/revenue", response_model=RevenueReport)
async def get_revenue_report(
    year: int = Query(..., ge=1, le=9999, description="Calendar year"),
    month: int | None = Query(None, ge=1, le=12, description="Calendar month; omit for the whole year"),
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> RevenueReport:
    """Revenue, deposits and outstanding balance of bookings created in the period."""
    context = TenantContext.from_tenant(tenant)
    bookings = await fetch_bookings(db, tenant.id)
    return revenue_report(bookings, year, month, context.currency)


@router.get("/guests", response_model=GuestStatistics)
async def get_guest_statistics(
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> GuestStatistics:
    """Guest counts, repeat and cancellation rates over all bookings."""
    bookings = await fetch_bookings(db, tenant.id)
    return guest_statistics(bookings)
