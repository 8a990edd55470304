"""Pydantic v2 schemas for tenant configuration."""

import uuid
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class Room(BaseModel):
    """A bookable unit configured on a tenant."""

    id: str = Field(..., min_length=1)
    name: str


def _check_timezone(value: str | None) -> str | None:
    if value is None:
        return value
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone '{value}'") from e
    return value


def _upper_currency(value: object) -> object:
    if isinstance(value, str):
        return value.strip().upper()
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TenantCreate(BaseModel):
    """Schema for registering a new tenant."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    timezone: str | None = Field(None, max_length=64)
    currency: str | None = Field(None, pattern="^[A-Z]{3}$")
    rooms: list[Room] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        return _check_timezone(value)

    @field_validator("currency", mode="before")
    @classmethod
    def _currency_upper(cls, value: object) -> object:
        return _upper_currency(value)

    @field_validator("rooms")
    @classmethod
    def unique_rooms(cls, rooms: list[Room]) -> list[Room]:
        """Room ids and room names must both be unique within a tenant."""
        if len({room.id for room in rooms}) != len(rooms):
            raise ValueError("Room ids must be unique")
        if len({room.name for room in rooms}) != len(rooms):
            raise ValueError("Room names must be unique")
        return rooms


class TenantUpdate(BaseModel):
    """Schema for partially updating a tenant. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    timezone: str | None = Field(None, max_length=64)
    currency: str | None = Field(None, pattern="^[A-Z]{3}$")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        return _check_timezone(value)

    @field_validator("currency", mode="before")
    @classmethod
    def _currency_upper(cls, value: object) -> object:
        return _upper_currency(value)


class RoomCreate(BaseModel):
    """A room to append to the tenant's room list; the id is generated when omitted."""

    name: str = Field(..., min_length=1, max_length=100)
    id: str | None = Field(None, min_length=1, max_length=100)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TenantResponse(BaseModel):
    """Tenant settings and its ordered room list."""

    id: uuid.UUID
    name: str
    email: str | None = None
    timezone: str | None = None
    currency: str | None = None
    rooms: list[Room]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
