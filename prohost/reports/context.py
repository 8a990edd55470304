"""Tenant context passed explicitly into report computations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from prohost.config import settings
from prohost.schemas.tenant import Room


@dataclass(frozen=True)
class TenantContext:
    """What the engine needs to know about the tenant that owns a booking snapshot."""

    tenant_id: uuid.UUID | str
    room_ids: tuple[str, ...]
    timezone: str = "UTC"
    currency: str = "EUR"

    def today(self) -> date:
        """Current calendar date in the tenant's timezone."""
        return datetime.now(ZoneInfo(self.timezone)).date()

    @classmethod
    def from_tenant(cls, tenant) -> "TenantContext":
        """Build a context from a ``Tenant`` row, validating its room list."""
        rooms = [Room.model_validate(room) for room in tenant.rooms or []]
        return cls(
            tenant_id=tenant.id,
            room_ids=tuple(room.id for room in rooms),
            timezone=tenant.timezone or settings.default_timezone,
            currency=tenant.currency or settings.default_currency,
        )
