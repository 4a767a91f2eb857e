"""Recent-notifications summary for the employee dashboard.

The derived views (visible, recent, unread count) are pure functions of the
provider's current notifications and the session's user id, memoised on that
snapshot. Selecting an item asks the provider to mark it read in the
background and navigates to its action URL without waiting for the write.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import webbrowser
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Protocol, Sequence

from ..config import config
from .models import Notification, NotificationType

logger = logging.getLogger(__name__)

# Icon names from the dashboard's icon set, keyed by category
NOTIFICATION_ICONS = {
    NotificationType.ASSIGNED: "file-check",
    NotificationType.SUBMITTED: "file-check",
    NotificationType.APPROVED: "calendar-check",
    NotificationType.REJECTED: "alert-triangle",
    NotificationType.REMINDER: "clock",
    NotificationType.REWARD: "gift",
    NotificationType.PENALTY: "dollar-sign",
    NotificationType.DEADLINE: "alert-triangle",
}


class NotificationProvider(Protocol):
    def get_notifications(self) -> Sequence[Notification]: ...

    async def mark_as_read(self, notification_id: Any) -> Any: ...


class SessionProvider(Protocol):
    def current_user_id(self) -> str | None: ...


class Navigator(Protocol):
    def navigate(self, url: str) -> None: ...


@dataclass(frozen=True)
class StaticSession:
    """Session whose user never changes (CLI runs, tests)."""

    user_id: str | None = None

    def current_user_id(self) -> str | None:
        return self.user_id


class BrowserNavigator:
    """Opens action URLs in the system browser."""

    def navigate(self, url: str) -> None:
        logger.info(f"Opening {url}")
        webbrowser.open(url)


def visible_notifications(notifications: Iterable[Notification], user_id: str | None) -> tuple[Notification, ...]:
    """Items addressed to ``user_id`` or broadcast to everyone."""
    if not user_id:
        return ()
    return tuple(n for n in notifications if n.is_visible_to(user_id))


def recent_notifications(notifications: Iterable[Notification], limit: int) -> tuple[Notification, ...]:
    """Newest first, at most ``limit`` items."""
    ordered = sorted(notifications, key=lambda n: n.created_at, reverse=True)
    return tuple(ordered[:limit])


def count_unread(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.read)


@dataclass(frozen=True)
class SummaryState:
    visible: tuple[Notification, ...]
    recent: tuple[Notification, ...]
    unread_count: int


@lru_cache(maxsize=16)
def derive_summary(notifications: tuple[Notification, ...], user_id: str | None, limit: int) -> SummaryState:
    visible = visible_notifications(notifications, user_id)
    return SummaryState(
        visible=visible,
        recent=recent_notifications(visible, limit),
        unread_count=count_unread(visible),
    )


@dataclass(frozen=True)
class SummaryCardItem:
    id: Any
    title: str
    message: str
    icon: str
    priority: str
    unread: bool
    timestamp: str
    action: str | None
    action_url: str | None
    details: tuple[str, ...]


@dataclass(frozen=True)
class SummaryCard:
    title: str
    description: str
    badge: str | None
    items: tuple[SummaryCardItem, ...]
    show_view_all: bool

    @property
    def is_empty(self) -> bool:
        return not self.items


def _details(notification: Notification) -> tuple[str, ...]:
    meta = notification.metadata
    if meta is None:
        return ()
    lines = []
    if meta.bonus_amount:
        lines.append(f"Bonus: {meta.bonus_amount:,.0f} VND")
    if meta.penalty_amount:
        lines.append(f"Penalty: {meta.penalty_amount:,.0f} VND")
    if meta.deadline:
        lines.append(f"Deadline: {meta.deadline.strftime('%d/%m/%Y')}")
    return tuple(lines)


def _card_item(notification: Notification) -> SummaryCardItem:
    return SummaryCardItem(
        id=notification.id,
        title=notification.title,
        message=notification.message,
        icon=NOTIFICATION_ICONS[notification.type],
        priority=notification.priority.value,
        unread=not notification.read,
        timestamp=notification.created_at.strftime("%d/%m %H:%M"),
        action=notification.action,
        action_url=notification.action_url,
        details=_details(notification),
    )


class NotificationSummary:
    """Summary of a user's recent notifications."""

    def __init__(
        self,
        provider: NotificationProvider,
        session: SessionProvider,
        navigator: Navigator,
        limit: int | None = None,
    ) -> None:
        self.provider = provider
        self.session = session
        self.navigator = navigator
        self.limit = limit if limit is not None else config.RECENT_NOTIFICATIONS_LIMIT
        self._pending: set[asyncio.Task] = set()

    @property
    def state(self) -> SummaryState:
        notifications = tuple(self.provider.get_notifications() or ())
        return derive_summary(notifications, self.session.current_user_id(), self.limit)

    @property
    def visible(self) -> tuple[Notification, ...]:
        return self.state.visible

    @property
    def recent(self) -> tuple[Notification, ...]:
        return self.state.recent

    @property
    def unread_count(self) -> int:
        return self.state.unread_count

    def render(self) -> SummaryCard | None:
        """Card contents, or None when nobody is signed in."""
        if not self.session.current_user_id():
            return None

        state = self.state
        unread = state.unread_count
        if unread:
            description = f"You have {unread} unread notification{'s' if unread != 1 else ''}"
        else:
            description = "All notifications have been read"

        return SummaryCard(
            title="Recent notifications",
            description=description,
            badge=f"{unread} new" if unread else None,
            items=tuple(_card_item(n) for n in state.recent),
            show_view_all=bool(state.recent),
        )

    def select(self, notification: Notification) -> asyncio.Task | threading.Thread | None:
        """Mark ``notification`` read in the background, then follow its action.

        Returns the background handle for the mark-read request, if any.
        """
        handle = None
        if not notification.read:
            handle = self._request_mark_read(notification.id)
        if notification.action_url:
            self.navigator.navigate(notification.action_url)
        return handle

    def _request_mark_read(self, notification_id: Any) -> asyncio.Task | threading.Thread:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self.provider.mark_as_read(notification_id))
            self._pending.add(task)
            task.add_done_callback(self._mark_read_done)
            return task

        coro = self.provider.mark_as_read(notification_id)
        thread = threading.Thread(target=self._mark_read_blocking, args=(coro,), daemon=True)
        thread.start()
        return thread

    def _mark_read_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"Failed to mark notification as read: {exc}")

    @staticmethod
    def _mark_read_blocking(coro: Any) -> None:
        try:
            asyncio.run(coro)
        except Exception as e:
            logger.warning(f"Failed to mark notification as read: {e}")
