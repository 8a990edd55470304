"""Occupancy evaluator — which days a room is taken, and what share of a window that is."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from prohost.reports.intervals import clamp, nights_between, overlaps_day, overlaps_range
from prohost.schemas.booking import BookingInterval

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def percentage(part: int | Decimal, whole: int | Decimal) -> Decimal:
    """Return ``part / whole * 100`` rounded to two places, or 0.00 when ``whole <= 0``."""
    if whole <= 0:
        return Decimal("0.00")
    rate = Decimal(part) * 100 / Decimal(whole)
    return rate.quantize(_CENT, rounding=ROUND_HALF_UP)


def active_bookings(bookings: Iterable[BookingInterval]) -> list[BookingInterval]:
    """Drop canceled bookings. No-shows still held the room and are kept."""
    return [b for b in bookings if not b.is_canceled]


def is_occupied(bookings: Iterable[BookingInterval], room: str, day: date) -> bool:
    """Return True if any non-canceled booking for ``room`` covers ``day``."""
    return any(b.room == room and not b.is_canceled and overlaps_day(b, day) for b in bookings)


def occupied_day_count(
    bookings: Iterable[BookingInterval],
    room: str,
    range_start: date,
    range_end: date,
) -> int:
    """Count days in the inclusive window on which ``room`` is occupied.

    Equivalent to testing ``is_occupied`` for every day of the window, but
    done as a sweep over the sorted, clamped stays. Overlapping stays are
    merged so a double-booked day counts once.
    """
    if range_end < range_start:
        return 0

    spans = sorted(
        clamp(b, range_start, range_end)
        for b in bookings
        if b.room == room and not b.is_canceled and overlaps_range(b, range_start, range_end)
    )

    occupied = 0
    run_start: date | None = None
    run_end: date | None = None
    for start, end in spans:
        if run_end is None or start > run_end:
            if run_end is not None:
                occupied += nights_between(run_start, run_end)
            run_start, run_end = start, end
        elif end > run_end:
            run_end = end
    if run_end is not None:
        occupied += nights_between(run_start, run_end)
    return occupied


def occupancy_rate(
    bookings: Iterable[BookingInterval],
    room: str,
    range_start: date,
    range_end: date,
) -> Decimal:
    """Percentage of days in the inclusive window during which ``room`` is occupied."""
    total_days = nights_between(range_start, range_end) + 1
    if total_days <= 0:
        return Decimal("0.00")
    return percentage(occupied_day_count(bookings, room, range_start, range_end), total_days)


def occupancy_by_room(
    bookings: Iterable[BookingInterval],
    room_ids: Iterable[str],
    range_start: date,
    range_end: date,
) -> dict[str, Decimal]:
    """Occupancy rate of each room, keyed by room id in the given order.

    Rooms are never merged into one "any room occupied" figure.
    """
    snapshot = active_bookings(bookings)
    rates = {room: occupancy_rate(snapshot, room, range_start, range_end) for room in room_ids}
    logger.debug("Computed occupancy for %d rooms over %s..%s", len(rates), range_start, range_end)
    return rates
