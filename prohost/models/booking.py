"""Booking model — date-ranged room reservations."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from prohost.database import Base, UUIDPrimaryKeyMixin
from prohost.schemas.booking import normalize_status


class Booking(UUIDPrimaryKeyMixin, Base):
    """A guest's stay in one room of a tenant, from check-in up to (not including) check-out.

    Only the primary facts are stored. Nights, total price and remaining
    balance are derived by ``BookingInterval`` when the row is read.
    """

    __tablename__ = "bookings"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_email: Mapped[str | None] = mapped_column(String(255), default=None)
    guest_phone: Mapped[str | None] = mapped_column(String(50), default=None)
    city: Mapped[str | None] = mapped_column(String(255), default=None)
    room: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    night_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    deposit: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    status: Mapped[str] = mapped_column(
        String(20),
        default="UPCOMING",
        index=True,
    )  # UPCOMING, ACTIVE, COMPLETED, CANCELED, NO_SHOW
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(back_populates="bookings", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (Index("ix_bookings_check_in", "check_in"),)

    @validates("status")
    def _normalize_status(self, key: str, value: str) -> str:
        # Older rows and imports spell statuses in lower case
        return normalize_status(value)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, tenant_id={self.tenant_id}, room={self.room!r}, status={self.status})>"
