"""Reading and publishing notifications kept in the store's notifications list."""

from __future__ import annotations

import time
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError

from tezos_gateway.notifications.models import Notification, PlatformType
from tezos_gateway.storage.store import KeyValueStore

log = structlog.get_logger("notifications")

NOTIFICATIONS_KEY = "notifications"


def to_ms(dt: datetime) -> int:
    """Epoch milliseconds; naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


async def get_notifications(
    store: KeyValueStore,
    platform: PlatformType,
    start_from_ms: int,
    now_ms: int | None = None,
) -> list[Notification]:
    """Notifications for *platform*, newest first.

    Mandatory notifications are always included; others only when created
    after *start_from_ms* and not in the future. Expired notifications are
    deleted from the store as they are encountered.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    parsed: list[tuple[str, Notification]] = []
    for raw in await store.lrange(NOTIFICATIONS_KEY, 0, -1):
        try:
            parsed.append((raw, Notification.model_validate_json(raw)))
        except ValidationError:
            log.warning("notification_malformed", raw=raw[:200])
    parsed.sort(key=lambda item: to_ms(item[1].created_at), reverse=True)

    result: list[Notification] = []
    for raw, notification in parsed:
        if notification.expiration_date is not None and to_ms(notification.expiration_date) < now_ms:
            await store.lrem(NOTIFICATIONS_KEY, 1, raw)
            log.info("notification_expired", id=notification.id)
            continue

        created_ms = to_ms(notification.created_at)
        if platform in notification.platforms and (
            notification.is_mandatory or start_from_ms < created_ms < now_ms
        ):
            result.append(notification)

    return result


async def add_notification(store: KeyValueStore, notification: Notification) -> None:
    await store.rpush(NOTIFICATIONS_KEY, notification.to_json())
    log.info("notification_added", id=notification.id, platforms=[p.value for p in notification.platforms])
