"""Rollup aggregator — per-room totals and per-month series over a report window.

Two rules hold across every report built here:

* Occupancy and fill rate always follow stay dates. A booking fills the nights
  it physically occupies, whatever basis the report uses.
* Revenue and night totals follow the selected basis date. With
  ``ReportBasis.CREATED`` a booking's revenue lands in the month it was
  created, and only when its stay also touches that month.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from prohost.reports.context import TenantContext
from prohost.reports.intervals import clamp, iter_months, month_bounds, nights_between, overlaps_range
from prohost.reports.occupancy import active_bookings, occupancy_rate, percentage
from prohost.schemas.booking import BookingInterval
from prohost.schemas.report import (
    ALL_ROOMS,
    MonthlyStats,
    MonthOccupancyReport,
    ReportBasis,
    ReportSummary,
    RoomStats,
)

logger = logging.getLogger(__name__)


def basis_date(booking: BookingInterval, basis: ReportBasis) -> date:
    """Return the date that places ``booking`` in a reporting period."""
    if basis is ReportBasis.CREATED:
        return booking.created_at.date()
    return booking.check_in


def _room_matches(booking: BookingInterval, room: str) -> bool:
    return room == ALL_ROOMS or booking.room == room


def _is_unknown_room(room: str, room_ids: Sequence[str]) -> bool:
    return room != ALL_ROOMS and room not in room_ids


def select_for_report(
    bookings: Iterable[BookingInterval],
    report_start: date,
    report_end: date,
    room: str = ALL_ROOMS,
    basis: ReportBasis = ReportBasis.STAY,
) -> list[BookingInterval]:
    """Non-canceled bookings whose basis date falls in the window and whose room matches."""
    return [
        b
        for b in active_bookings(bookings)
        if report_start <= basis_date(b, basis) <= report_end and _room_matches(b, room)
    ]


def room_totals(
    bookings: Iterable[BookingInterval],
    room_ids: Sequence[str],
    report_start: date,
    report_end: date,
    room: str = ALL_ROOMS,
    basis: ReportBasis = ReportBasis.STAY,
) -> list[RoomStats]:
    """Nights, revenue and occupancy for every candidate room.

    Candidates are all tenant rooms, or just ``room`` when it is one of them.
    A reversed window or an unknown room yields an empty list.
    """
    if report_end < report_start or _is_unknown_room(room, room_ids):
        return []

    snapshot = active_bookings(bookings)
    selected = select_for_report(snapshot, report_start, report_end, room, basis)
    candidates = room_ids if room == ALL_ROOMS else [room]

    stats: list[RoomStats] = []
    for room_id in candidates:
        room_bookings = [b for b in selected if b.room == room_id]
        stats.append(
            RoomStats(
                room_id=room_id,
                total_nights=sum(b.nights for b in room_bookings),
                total_revenue=sum((b.total_price for b in room_bookings), Decimal("0")),
                occupancy_rate=occupancy_rate(snapshot, room_id, report_start, report_end),
            )
        )
    return stats


def _month_label(month_start: date) -> str:
    return f"{calendar.month_abbr[month_start.month]} {month_start.year}"


def _month_stats(
    snapshot: list[BookingInterval],
    month_start: date,
    room: str,
    room_count: int,
    basis: ReportBasis,
) -> MonthlyStats:
    month_first, month_last = month_bounds(month_start.year, month_start.month)
    month_bookings = [
        b for b in snapshot if _room_matches(b, room) and overlaps_range(b, month_first, month_last)
    ]

    revenue = sum(
        (b.total_price for b in month_bookings if month_first <= basis_date(b, basis) <= month_last),
        Decimal("0"),
    )
    occupied_nights = sum(max(0, nights_between(*clamp(b, month_first, month_last))) for b in month_bookings)
    total_possible_nights = month_last.day * room_count

    return MonthlyStats(
        month=_month_label(month_first),
        month_key=f"{month_first.year}-{month_first.month:02d}",
        revenue=revenue,
        occupied_nights=occupied_nights,
        total_possible_nights=total_possible_nights,
        fill_rate=percentage(occupied_nights, total_possible_nights),
    )


def monthly_series(
    bookings: Iterable[BookingInterval],
    room_ids: Sequence[str],
    report_start: date,
    report_end: date,
    room: str = ALL_ROOMS,
    basis: ReportBasis = ReportBasis.STAY,
) -> list[MonthlyStats]:
    """Revenue and fill rate for every calendar month touching the window, ascending.

    Whole months are evaluated, including the parts of the boundary months
    that lie outside the window.
    """
    snapshot = [] if _is_unknown_room(room, room_ids) else active_bookings(bookings)
    room_count = len(room_ids) if room == ALL_ROOMS else 1
    return [
        _month_stats(snapshot, month_start, room, room_count, basis)
        for month_start in iter_months(report_start, report_end)
    ]


def build_report(
    bookings: Iterable[BookingInterval],
    context: TenantContext,
    report_start: date,
    report_end: date,
    room: str = ALL_ROOMS,
    basis: ReportBasis = ReportBasis.STAY,
) -> ReportSummary:
    """Build the full report shown on the reports screen.

    A reversed window is a caller mistake, not an error: it produces a report
    with no rooms, no months and zero totals.
    """
    snapshot = list(bookings)
    rooms = room_totals(snapshot, context.room_ids, report_start, report_end, room, basis)
    months = monthly_series(snapshot, context.room_ids, report_start, report_end, room, basis)

    if report_end < report_start or _is_unknown_room(room, context.room_ids):
        selected: list[BookingInterval] = []
    else:
        selected = select_for_report(snapshot, report_start, report_end, room, basis)

    if rooms:
        average = sum((r.occupancy_rate for r in rooms), Decimal("0")) / len(rooms)
        average = average.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    else:
        average = Decimal("0.00")

    logger.debug(
        "Report %s..%s room=%s basis=%s: %d bookings, %d rooms, %d months",
        report_start,
        report_end,
        room,
        basis.value,
        len(selected),
        len(rooms),
        len(months),
    )

    return ReportSummary(
        report_start=report_start,
        report_end=report_end,
        room=room,
        basis=basis,
        currency=context.currency,
        rooms=rooms,
        months=months,
        total_revenue=sum((b.total_price for b in selected), Decimal("0")),
        total_nights=sum(b.nights for b in selected),
        booking_count=len(selected),
        average_occupancy_rate=average,
    )


def month_occupancy(
    bookings: Iterable[BookingInterval],
    room_ids: Sequence[str],
    year: int,
    month: int,
    room: str | None = None,
) -> MonthOccupancyReport:
    """Occupied nights against capacity for one calendar month.

    Capacity is the month length times one room when ``room`` is given,
    otherwise times the tenant's room count.

    Raises:
        ValueError: If ``month`` is not between 1 and 12.
    """
    month_first, _ = month_bounds(year, month)
    stats = monthly_series(bookings, room_ids, month_first, month_first, room or ALL_ROOMS)[0]
    return MonthOccupancyReport(
        room=room or "All",
        month=stats.month_key,
        total_nights=stats.total_possible_nights,
        occupied_nights=stats.occupied_nights,
        occupancy_rate=stats.fill_rate,
    )
