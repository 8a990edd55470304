"""Tests for the occupancy evaluator."""

from datetime import date
from decimal import Decimal

from prohost.reports.intervals import iter_days
from prohost.reports.occupancy import (
    active_bookings,
    is_occupied,
    occupancy_by_room,
    occupancy_rate,
    occupied_day_count,
    percentage,
)

MARCH_START = date(2026, 3, 1)
MARCH_END = date(2026, 3, 31)


class TestIsOccupied:
    """Day-level occupancy of one room."""

    def test_half_open_stay(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13")]
        for day in (10, 11, 12):
            assert is_occupied(bookings, "r1", date(2026, 3, day))
        assert not is_occupied(bookings, "r1", date(2026, 3, 13))
        assert not is_occupied(bookings, "r1", date(2026, 3, 9))

    def test_checkout_day_free_for_next_guest(self, make_booking) -> None:
        bookings = [
            make_booking("2026-03-10", "2026-03-13"),
            make_booking("2026-03-13", "2026-03-15"),
        ]
        assert is_occupied(bookings, "r1", date(2026, 3, 13))
        assert occupied_day_count(bookings, "r1", MARCH_START, MARCH_END) == 5

    def test_other_rooms_do_not_count(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13", room="r2")]
        assert not is_occupied(bookings, "r1", date(2026, 3, 11))
        assert is_occupied(bookings, "r2", date(2026, 3, 11))

    def test_canceled_booking_never_occupies(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13", status="CANCELED")]
        assert not is_occupied(bookings, "r1", date(2026, 3, 11))
        assert occupied_day_count(bookings, "r1", MARCH_START, MARCH_END) == 0

    def test_no_show_still_holds_the_room(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13", status="NO_SHOW")]
        assert is_occupied(bookings, "r1", date(2026, 3, 11))
        assert occupied_day_count(bookings, "r1", MARCH_START, MARCH_END) == 3


class TestOccupiedDayCount:
    """Counting occupied days inside an inclusive window."""

    def test_only_overlap_with_window_counts(self, make_booking) -> None:
        bookings = [make_booking("2026-02-25", "2026-03-05")]
        assert occupied_day_count(bookings, "r1", MARCH_START, MARCH_END) == 4
        assert occupied_day_count(bookings, "r1", date(2026, 2, 1), date(2026, 2, 28)) == 4

    def test_window_end_day_is_included(self, make_booking) -> None:
        bookings = [make_booking("2026-03-30", "2026-04-03")]
        assert occupied_day_count(bookings, "r1", MARCH_START, MARCH_END) == 2

    def test_double_booking_saturates(self, make_booking) -> None:
        bookings = [
            make_booking("2026-03-10", "2026-03-15"),
            make_booking("2026-03-12", "2026-03-18"),
        ]
        assert occupied_day_count(bookings, "r1", MARCH_START, MARCH_END) == 8

    def test_sweep_matches_day_by_day_count(self, make_booking) -> None:
        """The sweep must agree with testing every day individually."""
        bookings = [
            make_booking("2026-02-20", "2026-03-02"),
            make_booking("2026-03-01", "2026-03-04"),
            make_booking("2026-03-04", "2026-03-06"),
            make_booking("2026-03-08", "2026-03-09"),
            make_booking("2026-03-10", "2026-03-20"),
            make_booking("2026-03-11", "2026-03-12"),
            make_booking("2026-03-15", "2026-03-25", status="CANCELED"),
            make_booking("2026-03-28", "2026-04-10"),
            make_booking("2026-03-05", "2026-03-30", room="r2"),
        ]
        start, end = date(2026, 3, 3), date(2026, 3, 29)
        naive = sum(1 for day in iter_days(start, end) if is_occupied(bookings, "r1", day))
        assert occupied_day_count(bookings, "r1", start, end) == naive

    def test_reversed_window_counts_nothing(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13")]
        assert occupied_day_count(bookings, "r1", MARCH_END, MARCH_START) == 0


class TestOccupancyRate:
    """Percentage of a window a room is occupied."""

    def test_no_bookings_is_exactly_zero(self) -> None:
        assert occupancy_rate([], "r1", MARCH_START, MARCH_END) == 0

    def test_booking_covering_window_is_full(self, make_booking) -> None:
        bookings = [make_booking("2026-03-01", "2026-04-01")]
        assert occupancy_rate(bookings, "r1", MARCH_START, MARCH_END) == 100

    def test_partial_rate_is_rounded(self, make_booking) -> None:
        bookings = [make_booking("2026-03-01", "2026-03-02")]
        # 1 of 3 days
        assert occupancy_rate(bookings, "r1", date(2026, 3, 1), date(2026, 3, 3)) == Decimal("33.33")

    def test_single_day_window(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13")]
        assert occupancy_rate(bookings, "r1", date(2026, 3, 12), date(2026, 3, 12)) == 100
        assert occupancy_rate(bookings, "r1", date(2026, 3, 13), date(2026, 3, 13)) == 0

    def test_reversed_window_is_zero(self, make_booking) -> None:
        bookings = [make_booking("2026-03-10", "2026-03-13")]
        assert occupancy_rate(bookings, "r1", MARCH_END, MARCH_START) == 0

    def test_by_room_keeps_rooms_apart(self, make_booking) -> None:
        bookings = [
            make_booking("2026-03-01", "2026-04-01", room="r1"),
            make_booking("2026-03-01", "2026-03-02", room="r2", status="CANCELED"),
        ]
        rates = occupancy_by_room(bookings, ["r2", "r1", "r3"], MARCH_START, MARCH_END)
        assert list(rates) == ["r2", "r1", "r3"]
        assert rates == {"r1": Decimal("100.00"), "r2": Decimal("0.00"), "r3": Decimal("0.00")}


class TestHelpers:
    def test_percentage_rounds_half_up(self) -> None:
        assert percentage(2, 3) == Decimal("66.67")
        assert percentage(1, 8) == Decimal("12.50")

    def test_percentage_of_nothing(self) -> None:
        assert percentage(5, 0) == Decimal("0.00")

    def test_active_bookings_does_not_mutate_input(self, make_booking) -> None:
        bookings = [make_booking(status="CANCELED"), make_booking()]
        kept = active_bookings(bookings)
        assert len(kept) == 1
        assert len(bookings) == 2
