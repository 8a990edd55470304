"""Pydantic v2 schemas for report outputs."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

ALL_ROOMS = "ALL"


class ReportBasis(str, Enum):
    """Which date places a booking inside a reporting period."""

    STAY = "stay"  # check_in
    CREATED = "created"  # created_at, date portion


class RoomStats(BaseModel):
    """Totals for one room over a report window."""

    room_id: str
    total_nights: int
    total_revenue: Decimal
    occupancy_rate: Decimal  # percentage 0.00–100.00


class MonthlyStats(BaseModel):
    """Revenue and fill rate for one calendar month."""

    month: str  # "Mar 2026"
    month_key: str  # "2026-03"
    revenue: Decimal
    occupied_nights: int
    total_possible_nights: int
    fill_rate: Decimal  # percentage 0.00–100.00


class ReportSummary(BaseModel):
    """Per-room totals and per-month series over one window."""

    report_start: date
    report_end: date
    room: str = ALL_ROOMS
    basis: ReportBasis = ReportBasis.STAY
    currency: str = "EUR"
    rooms: list[RoomStats]
    months: list[MonthlyStats]
    total_revenue: Decimal
    total_nights: int
    booking_count: int
    average_occupancy_rate: Decimal


class MonthOccupancyReport(BaseModel):
    """Occupancy of one room (or all rooms) during one calendar month."""

    room: str  # room id, or "All"
    month: str  # "2026-03"
    total_nights: int
    occupied_nights: int
    occupancy_rate: Decimal


class RevenueReport(BaseModel):
    """Money collected for bookings created in a month or a whole year."""

    year: int
    month: int | None = None
    currency: str = "EUR"
    total_revenue: Decimal
    total_deposits: Decimal
    total_outstanding: Decimal
    booking_count: int
    average_booking_value: Decimal


class GuestStatistics(BaseModel):
    """Guest-level statistics over a tenant's whole booking history."""

    total_guests: int
    unique_cities: int
    average_night_stay: Decimal
    repeat_guest_rate: Decimal
    cancellation_rate: Decimal
