"""Half-open date interval arithmetic for bookings and calendar windows.

A booking occupies ``[check_in, check_out)``: the check-out day is free for
the next guest. Report windows are given as inclusive ``[start, end]`` day
ranges, the way a user picks them on a calendar.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, timedelta

from prohost.schemas.booking import BookingInterval

ONE_DAY = timedelta(days=1)


class EmptyIntersectionError(ValueError):
    """Raised when clamping a booking to a window it does not overlap."""


def overlaps_day(booking: BookingInterval, day: date) -> bool:
    """Return True if the booking occupies the room on ``day``."""
    return booking.check_in <= day < booking.check_out


def overlaps_range(booking: BookingInterval, range_start: date, range_end: date) -> bool:
    """Return True if the stay shares at least one night with the inclusive window."""
    return booking.check_in <= range_end and booking.check_out > range_start


def clamp(booking: BookingInterval, range_start: date, range_end: date) -> tuple[date, date]:
    """Intersect the stay with the inclusive window ``[range_start, range_end]``.

    The result is half-open like the booking itself, so
    ``nights_between(*clamp(...))`` is the number of nights spent inside the
    window.

    Raises:
        EmptyIntersectionError: If the booking does not overlap the window.
            Check with ``overlaps_range`` first.
    """
    if not overlaps_range(booking, range_start, range_end):
        raise EmptyIntersectionError(
            f"booking {booking.id} [{booking.check_in}, {booking.check_out}) "
            f"does not overlap [{range_start}, {range_end}]"
        )
    # A stay ending inside the window needs no day past range_end, which may be date.max
    end = booking.check_out if booking.check_out <= range_end else range_end + ONE_DAY
    return max(booking.check_in, range_start), end


def nights_between(start: date, end: date) -> int:
    return (end - start).days


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    day = start
    while day <= end:
        yield day
        if day == end:
            return
        day += ONE_DAY


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def iter_months(start: date, end: date) -> Iterator[date]:
    """Yield the first day of each month intersecting ``[start, end]``, ascending.

    Both boundary months are included. A reversed window yields nothing.
    """
    if end < start:
        return
    current = start.replace(day=1)
    last = end.replace(day=1)
    while True:
        yield current
        if current == last:
            return
        if current.month == 12:
            current = current.replace(year=current.year + 1, month=1)
        else:
            current = current.replace(month=current.month + 1)
