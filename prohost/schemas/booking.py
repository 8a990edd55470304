"""Pydantic v2 schemas for bookings — the validated interval entity plus request shapes."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator, model_validator


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    UPCOMING = "UPCOMING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    NO_SHOW = "NO_SHOW"


def normalize_status(value: object) -> object:
    """Accept lower-case and hyphenated spellings (``no-show``) of a status."""
    if isinstance(value, str):
        return value.strip().upper().replace("-", "_")
    return value


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------


class BookingInterval(BaseModel):
    """A booking as the reporting engine sees it: a half-open stay ``[check_in, check_out)``.

    Instances are immutable and validated once, when the storage layer hands
    them over. ``nights``, ``total_price`` and ``remaining`` are always derived
    from the stored facts and cannot be set.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID | int | str
    tenant_id: uuid.UUID | str
    room: str
    check_in: date
    check_out: date
    night_price: Decimal = Field(..., ge=0)
    deposit: Decimal = Field(Decimal("0"), ge=0)
    status: BookingStatus = BookingStatus.UPCOMING
    created_at: datetime
    guest_name: str = ""
    guest_email: str | None = None
    guest_phone: str | None = None
    city: str | None = None
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_upper(cls, value: object) -> object:
        return normalize_status(value)

    @model_validator(mode="after")
    def check_dates(self) -> "BookingInterval":
        """Reject zero-night and inverted stays."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_price(self) -> Decimal:
        return self.night_price * self.nights

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining(self) -> Decimal:
        # Not clamped: an overpaid booking has a negative balance.
        return self.total_price - self.deposit

    @property
    def is_canceled(self) -> bool:
        return self.status is BookingStatus.CANCELED


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for creating a new booking."""

    guest_name: str = Field(..., min_length=1, max_length=255)
    guest_email: EmailStr | None = None
    guest_phone: str | None = Field(None, max_length=50)
    city: str | None = Field(None, max_length=255)
    room: str = Field(..., min_length=1, max_length=100)
    check_in: date
    check_out: date
    night_price: Decimal = Field(..., ge=0)
    deposit: Decimal = Field(Decimal("0"), ge=0)
    status: BookingStatus = BookingStatus.UPCOMING
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_upper(cls, value: object) -> object:
        return normalize_status(value)

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking. All fields optional."""

    guest_name: str | None = Field(None, min_length=1, max_length=255)
    guest_email: EmailStr | None = None
    guest_phone: str | None = Field(None, max_length=50)
    city: str | None = Field(None, max_length=255)
    room: str | None = Field(None, min_length=1, max_length=100)
    check_in: date | None = None
    check_out: date | None = None
    night_price: Decimal | None = Field(None, ge=0)
    deposit: Decimal | None = Field(None, ge=0)
    status: BookingStatus | None = None
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_upper(cls, value: object) -> object:
        return normalize_status(value)

    @model_validator(mode="after")
    def check_dates(self) -> "BookingUpdate":
        """If both dates are provided, validate check_out > check_in."""
        if self.check_in is not None and self.check_out is not None and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingFilter(BaseModel):
    """Field filters for booking queries; every field is optional and they combine with AND."""

    status: BookingStatus | None = None
    room: str | None = None
    start_date: date | None = None  # check_in >= start_date
    end_date: date | None = None  # check_in <= end_date
    guest_name: str | None = None  # case-insensitive substring

    @field_validator("status", mode="before")
    @classmethod
    def _status_upper(cls, value: object) -> object:
        return normalize_status(value)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingInterval]
    total: int


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------

MAX_BULK_BOOKINGS = 1000


class BookingBulkCreate(BaseModel):
    """A batch of bookings imported together; either all are stored or none."""

    bookings: list[BookingCreate] = Field(..., min_length=1, max_length=MAX_BULK_BOOKINGS)


class BookingBulkDelete(BaseModel):
    """Ids of bookings to delete; ids of other tenants are ignored."""

    ids: list[uuid.UUID] = Field(..., min_length=1, max_length=MAX_BULK_BOOKINGS)


class BookingBulkDeleteResponse(BaseModel):
    deleted: int
