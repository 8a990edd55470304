"""Tenant settings and room list API routes."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prohost.api.deps import get_current_tenant, get_db
from prohost.models.tenant import Tenant
from prohost.schemas.tenant import RoomCreate, TenantCreate, TenantResponse, TenantUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tenants", tags=["tenants"])


async def _check_name_available(db: AsyncSession, name: str) -> None:
    """Raise 409 if another tenant already uses ``name``."""
    result = await db.execute(select(Tenant.id).where(Tenant.name == name))
    if result.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Name already taken",
        )


@router.post(
    "",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new tenant",
)
async def create_tenant(
    body: TenantCreate,
    db: AsyncSession = Depends(get_db),
) -> TenantResponse:
    """Create a tenant with its initial room list."""
    await _check_name_available(db, body.name)

    tenant = Tenant(**body.model_dump())
    db.add(tenant)
    await db.flush()
    await db.refresh(tenant)
    logger.info("Created tenant %s with %d rooms", tenant.id, len(tenant.rooms))
    return TenantResponse.model_validate(tenant)


@router.get(
    "/me",
    response_model=TenantResponse,
    summary="Get the current tenant",
)
async def get_tenant(tenant: Tenant = Depends(get_current_tenant)) -> TenantResponse:
    return TenantResponse.model_validate(tenant)


@router.put(
    "/me",
    response_model=TenantResponse,
    summary="Update the current tenant",
)
async def update_tenant(
    body: TenantUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> TenantResponse:
    """Partially update the tenant. Only explicitly set fields are changed."""
    update_data = body.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    elif update_data["name"] != tenant.name:
        await _check_name_available(db, update_data["name"])

    for field, value in update_data.items():
        setattr(tenant, field, value)

    db.add(tenant)
    await db.flush()
    await db.refresh(tenant)
    return TenantResponse.model_validate(tenant)


@router.post(
    "/me/rooms",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a room",
)
async def add_room(
    body: RoomCreate,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> TenantResponse:
    """Append a room to the end of the tenant's room list."""
    rooms = list(tenant.rooms or [])
    if any(room.get("name") == body.name for room in rooms):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room name already exists",
        )

    room_id = body.id or f"R{uuid.uuid4().hex[:8]}"
    if any(room.get("id") == room_id for room in rooms):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room id already exists",
        )

    # A new list, so the JSON column is marked dirty
    tenant.rooms = [*rooms, {"id": room_id, "name": body.name}]
    db.add(tenant)
    await db.flush()
    await db.refresh(tenant)
    logger.info("Added room %s to tenant %s", room_id, tenant.id)
    return TenantResponse.model_validate(tenant)


@router.delete(
    "/me/rooms/{room_id}",
    response_model=TenantResponse,
    summary="Remove a room",
)
async def remove_room(
    room_id: str,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
) -> TenantResponse:
    """Drop a room from the room list. Its bookings are kept."""
    rooms = list(tenant.rooms or [])
    remaining = [room for room in rooms if room.get("id") != room_id]
    if len(remaining) == len(rooms):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room not found",
        )

    tenant.rooms = remaining
    db.add(tenant)
    await db.flush()
    await db.refresh(tenant)
    logger.info("Removed room %s from tenant %s", room_id, tenant.id)
    return TenantResponse.model_validate(tenant)
