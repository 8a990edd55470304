"""Filter/query facade — narrow, search, sort and page a booking snapshot.

Every function here is read-only: it returns a new list and never reorders or
mutates the collection it was given.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from enum import Enum

from prohost.config import settings
from prohost.schemas.booking import BookingFilter, BookingInterval

SORT_FIELDS = {"check_in", "check_out", "created_at", "guest_name", "room", "total_price"}


class StatusGroup(str, Enum):
    """Tabs of the booking list, relative to the tenant's current date."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    PAST = "past"
    CANCELED = "canceled"
    ALL = "all"


def matches_status_group(booking: BookingInterval, group: StatusGroup, today: date) -> bool:
    if group is StatusGroup.ALL:
        return True
    if group is StatusGroup.CANCELED:
        return booking.is_canceled
    if booking.is_canceled:
        return False
    if group is StatusGroup.UPCOMING:
        return booking.check_in >= today
    if group is StatusGroup.ACTIVE:
        return booking.check_in < today < booking.check_out
    return booking.check_out <= today  # PAST


def filter_by_status_group(
    bookings: Iterable[BookingInterval],
    group: StatusGroup,
    today: date,
) -> list[BookingInterval]:
    """Keep the bookings belonging to ``group`` as of ``today``.

    ``today`` is the tenant-local calendar date (see ``TenantContext.today``).
    """
    return [b for b in bookings if matches_status_group(b, group, today)]


def matches_text(booking: BookingInterval, term: str) -> bool:
    """Case-insensitive match on guest name or city; plain substring match on phone."""
    if not term:
        return True
    folded = term.casefold()
    return (
        folded in booking.guest_name.casefold()
        or (booking.city is not None and folded in booking.city.casefold())
        or (booking.guest_phone is not None and term in booking.guest_phone)
    )


def search_text(bookings: Iterable[BookingInterval], term: str | None) -> list[BookingInterval]:
    """Keep bookings matching ``term``. An empty term keeps everything."""
    return [b for b in bookings if matches_text(b, term or "")]


def sort_by_check_in_descending(bookings: Iterable[BookingInterval]) -> list[BookingInterval]:
    """Newest check-in first, compared as dates. Ties keep their input order."""
    return sorted(bookings, key=lambda b: b.check_in, reverse=True)


def paginate(bookings: Sequence[BookingInterval], page_size: int, offset: int) -> list[BookingInterval]:
    """Return ``bookings[offset:offset + page_size]``; past the end this is empty.

    Raises:
        ValueError: If ``page_size`` or ``offset`` is negative.
    """
    if page_size < 0 or offset < 0:
        raise ValueError("page_size and offset must not be negative")
    return list(bookings[offset : offset + page_size])


def matches_filter(booking: BookingInterval, booking_filter: BookingFilter) -> bool:
    if booking_filter.status is not None and booking.status is not booking_filter.status:
        return False
    if booking_filter.room is not None and booking.room != booking_filter.room:
        return False
    if booking_filter.start_date is not None and booking.check_in < booking_filter.start_date:
        return False
    if booking_filter.end_date is not None and booking.check_in > booking_filter.end_date:
        return False
    if booking_filter.guest_name and booking_filter.guest_name.casefold() not in booking.guest_name.casefold():
        return False
    return True


def apply_filter(bookings: Iterable[BookingInterval], booking_filter: BookingFilter | None) -> list[BookingInterval]:
    """Keep bookings matching every field set on ``booking_filter``."""
    if booking_filter is None:
        return list(bookings)
    return [b for b in bookings if matches_filter(b, booking_filter)]


def sort_bookings(
    bookings: Iterable[BookingInterval],
    sort_by: str = "check_in",
    sort_order: str = "desc",
) -> list[BookingInterval]:
    """Sort by one of ``SORT_FIELDS``; any order other than ``asc`` sorts descending.

    Raises:
        ValueError: If ``sort_by`` is not a sortable field.
    """
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by '{sort_by}'. Must be one of: {', '.join(sorted(SORT_FIELDS))}")
    return sorted(bookings, key=lambda b: getattr(b, sort_by), reverse=sort_order.lower() != "asc")


def query_bookings(
    bookings: Iterable[BookingInterval],
    booking_filter: BookingFilter | None = None,
    *,
    group: StatusGroup = StatusGroup.ALL,
    search: str | None = None,
    today: date | None = None,
    limit: int | None = None,
    offset: int = 0,
    sort_by: str = "check_in",
    sort_order: str = "desc",
) -> tuple[list[BookingInterval], int]:
    """Filter, sort and page a snapshot the way the booking list does.

    ``limit`` defaults to ``settings.default_page_size`` and is capped at
    ``settings.max_page_size``.

    Returns:
        A tuple of (page, total) where ``total`` counts every match before paging.
    """
    if group is not StatusGroup.ALL and today is None:
        raise ValueError("today is required to filter by status group")

    matched = apply_filter(bookings, booking_filter)
    if group is not StatusGroup.ALL:
        matched = filter_by_status_group(matched, group, today)
    matched = sort_bookings(search_text(matched, search), sort_by, sort_order)

    page_size = min(limit if limit is not None else settings.default_page_size, settings.max_page_size)
    return paginate(matched, page_size, offset), len(matched)


def bookings_for_room(bookings: Iterable[BookingInterval], room: str) -> list[BookingInterval]:
    """All bookings of one room, newest check-in first."""
    return sort_by_check_in_descending(b for b in bookings if b.room == room)


def bookings_within_range(bookings: Iterable[BookingInterval], start: date, end: date) -> list[BookingInterval]:
    """Bookings whose whole stay lies inside ``[start, end]``, earliest check-in first.

    A reversed range matches nothing.
    """
    return sorted(
        (b for b in bookings if b.check_in >= start and b.check_out <= end),
        key=lambda b: b.check_in,
    )
