"""Notification manager for KPI Portal.

Provides CRUD operations for the notifications table. It is the
notification provider consumed by the summary view.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..database.manager import DictCursor
from .models import (
    BROADCAST_USER_ID,
    Notification,
    NotificationMetadata,
    NotificationPriority,
    NotificationType,
)

if TYPE_CHECKING:
    from ..database.manager import DatabaseManager

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, type, priority, title, message, read, action, action_url, metadata, created_at"


class NotificationManager:
    """Manages in-app notifications backed by the notifications table."""

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.db_manager = db_manager

    def create(
        self,
        user_id: str,
        type: NotificationType | str,
        title: str,
        message: str | None = None,
        priority: NotificationPriority | str = NotificationPriority.MEDIUM,
        action: str | None = None,
        action_url: str | None = None,
        metadata: NotificationMetadata | dict[str, Any] | None = None,
        created_at: datetime | None = None,
    ) -> Notification:
        """Insert a new notification.

        Parameters
        ----------
        user_id:
            Recipient employee id, or ``BROADCAST_USER_ID`` for everyone.
        type:
            Notification category (assigned, submitted, approved, rejected,
            reminder, reward, penalty, deadline).
        title:
            Short summary shown in the summary card.
        message:
            Optional longer description.
        metadata:
            Optional bonus/penalty amounts and deadline.

        Returns
        -------
        The created notification.
        """
        # Validate before touching the table
        type = NotificationType(type)
        priority = NotificationPriority(priority)
        if isinstance(metadata, dict):
            metadata = NotificationMetadata(**metadata)
        encoded = metadata.model_dump_json(exclude_none=True) if metadata else None

        columns = ["user_id", "type", "priority", "title", "message", "action", "action_url", "metadata"]
        values: list[Any] = [user_id, type.value, priority.value, title, message, action, action_url, encoded]
        if created_at is not None:
            columns.append("created_at")
            values.append(created_at)

        with self.db_manager.get_connection() as conn:
            row = DictCursor(conn).execute(
                f"""
                INSERT INTO notifications ({', '.join(columns)})
                VALUES ({', '.join('?' for _ in columns)})
                RETURNING {_COLUMNS}
                """,
                values,
            ).fetchone()
            conn.commit()

        return Notification.model_validate(row)

    def get_notifications(self, limit: int | None = None) -> list[Notification]:
        """Fetch notifications for every recipient, newest first."""
        sql = f"SELECT {_COLUMNS} FROM notifications ORDER BY created_at DESC, id DESC"
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        with self.db_manager.get_read_connection() as conn:
            rows = DictCursor(conn).execute(sql).fetchall()
        return [Notification.model_validate(r) for r in rows]

    def get_unread_count(self, user_id: str) -> int:
        """Return the number of unread notifications visible to ``user_id``."""
        with self.db_manager.get_read_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM notifications WHERE read = FALSE AND user_id IN (?, ?)",
                [user_id, BROADCAST_USER_ID],
            ).fetchone()
            return int(row[0])

    def mark_read(self, notification_id: int) -> bool:
        """Mark a single notification as read. Returns True if the row existed."""
        with self.db_manager.get_connection() as conn:
            existing = conn.execute(
                "SELECT id FROM notifications WHERE id = ?",
                [notification_id],
            ).fetchone()
            if existing is None:
                return False
            conn.execute(
                "UPDATE notifications SET read = TRUE WHERE id = ?",
                [notification_id],
            )
            conn.commit()
        return True

    async def mark_as_read(self, notification_id: int) -> bool:
        """Async form of mark_read() for callers on an event loop."""
        found = await asyncio.to_thread(self.mark_read, notification_id)
        if not found:
            logger.warning(f"Notification {notification_id} not found, nothing marked read")
        return found

    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification addressed to ``user_id`` as read.

        Broadcast notifications are shared rows, so they are left alone.
        Returns count affected.
        """
        with self.db_manager.get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM notifications WHERE read = FALSE AND user_id = ?",
                [user_id],
            ).fetchone()
            conn.execute(
                "UPDATE notifications SET read = TRUE WHERE read = FALSE AND user_id = ?",
                [user_id],
            )
            conn.commit()
        return int(row[0])
