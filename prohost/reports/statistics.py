"""Revenue and guest statistics over a tenant's booking history."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from prohost.reports.intervals import month_bounds
from prohost.reports.occupancy import active_bookings, percentage
from prohost.schemas.booking import BookingInterval
from prohost.schemas.report import GuestStatistics, RevenueReport

_CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def revenue_report(
    bookings: Iterable[BookingInterval],
    year: int,
    month: int | None = None,
    currency: str = "EUR",
) -> RevenueReport:
    """Summarize money for non-canceled bookings created in ``month`` of ``year``.

    When ``month`` is omitted the whole year is covered. ``currency`` labels the
    amounts; no conversion happens.

    Raises:
        ValueError: If ``month`` is given and not between 1 and 12.
    """
    if month is None:
        period_start, _ = month_bounds(year, 1)
        _, period_end = month_bounds(year, 12)
    else:
        period_start, period_end = month_bounds(year, month)

    created = [b for b in active_bookings(bookings) if period_start <= b.created_at.date() <= period_end]

    total_revenue = sum((b.total_price for b in created), Decimal("0"))
    booking_count = len(created)
    average = total_revenue / booking_count if booking_count else Decimal("0")

    return RevenueReport(
        year=year,
        month=month,
        currency=currency,
        total_revenue=_money(total_revenue),
        total_deposits=_money(sum((b.deposit for b in created), Decimal("0"))),
        total_outstanding=_money(sum((b.remaining for b in created), Decimal("0"))),
        booking_count=booking_count,
        average_booking_value=_money(average),
    )


def guest_statistics(bookings: Iterable[BookingInterval]) -> GuestStatistics:
    """Guest-level figures over every booking, canceled ones included.

    A repeat booking is any booking beyond the first for the same guest name.
    """
    snapshot = list(bookings)
    total = len(snapshot)

    cities = {b.city for b in snapshot if b.city}
    unique_guests = {b.guest_name for b in snapshot}
    canceled = sum(1 for b in snapshot if b.is_canceled)
    total_nights = sum(b.nights for b in snapshot)

    average_stay = _money(Decimal(total_nights) / total) if total else Decimal("0.00")

    return GuestStatistics(
        total_guests=total,
        unique_cities=len(cities),
        average_night_stay=average_stay,
        repeat_guest_rate=percentage(total - len(unique_guests), total),
        cancellation_rate=percentage(canceled, total),
    )
