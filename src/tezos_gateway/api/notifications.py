"""Notification routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from tezos_gateway.api.deps import Services, get_services, require_admin
from tezos_gateway.notifications import (
    Notification,
    PlatformType,
    add_notification,
    get_notifications,
)

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(
    platform: PlatformType,
    start_from_time: int = Query(0, alias="startFromTime", ge=0),
    services: Services = Depends(get_services),
):
    notifications = await get_notifications(services.store, platform, start_from_time)
    return [n.model_dump(mode="json", by_alias=True, exclude_none=True) for n in notifications]


@router.post("", dependencies=[Depends(require_admin)])
async def create_notification(
    notification: Notification,
    services: Services = Depends(get_services),
):
    await add_notification(services.store, notification)
    return {"message": "Notification has been added successfully"}
