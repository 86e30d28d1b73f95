"""Wallet notifications."""

from tezos_gateway.notifications.models import Notification, NotificationType, PlatformType
from tezos_gateway.notifications.service import add_notification, get_notifications

__all__ = [
    "Notification",
    "NotificationType",
    "PlatformType",
    "add_notification",
    "get_notifications",
]
