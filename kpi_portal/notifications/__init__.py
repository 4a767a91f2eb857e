"""In-app notifications: records, storage and the dashboard summary."""

from .manager import NotificationManager
from .models import (
    BROADCAST_USER_ID,
    BroadcastRecipient,
    Notification,
    NotificationMetadata,
    NotificationPriority,
    NotificationType,
    UserRecipient,
)
from .summary import BrowserNavigator, NotificationSummary, StaticSession, SummaryCard

__all__ = [
    "BROADCAST_USER_ID",
    "BroadcastRecipient",
    "BrowserNavigator",
    "Notification",
    "NotificationManager",
    "NotificationMetadata",
    "NotificationPriority",
    "NotificationSummary",
    "NotificationType",
    "StaticSession",
    "SummaryCard",
    "UserRecipient",
]
