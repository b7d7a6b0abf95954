"""Notification senders."""

from src.marketplace_auth.core.notifications.base import NotificationSender
from src.marketplace_auth.core.notifications.email import ResendNotificationSender

__all__ = [
    "NotificationSender",
    "ResendNotificationSender",
]
