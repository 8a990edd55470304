"""Shared API dependencies — single import point for all routers.

Re-exports the database session dependency and resolves the calling tenant
so that router modules can import everything they need from one place::

    from prohost.api.deps import get_current_tenant, get_db
"""

import uuid

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from prohost.database import get_db
from prohost.models.tenant import Tenant
from prohost.services.booking_store import get_tenant

__all__ = [
    "get_db",
    "get_current_tenant",
]


async def get_current_tenant(
    x_tenant_id: uuid.UUID = Header(..., description="Tenant whose data the request reads"),
    db: AsyncSession = Depends(get_db),
) -> Tenant:
    """Return the tenant named by the ``X-Tenant-ID`` header.

    Raises:
        HTTPException 404: If no such tenant exists.
    """
    tenant = await get_tenant(db, x_tenant_id)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    return tenant
