"""Tenant model — an isolated account owning rooms and bookings."""

from datetime import datetime

from sqlalchemy import JSON, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prohost.database import Base, UUIDPrimaryKeyMixin


class Tenant(UUIDPrimaryKeyMixin, Base):
    """A property business whose rooms and bookings are isolated from other tenants."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    timezone: Mapped[str | None] = mapped_column(String(64), default=None)  # IANA name, e.g. Europe/Rome
    currency: Mapped[str | None] = mapped_column(String(3), default=None)
    # Ordered list of {"id": "...", "name": "..."} objects
    rooms: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="tenant", lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name!r}, rooms={len(self.rooms or [])})>"
