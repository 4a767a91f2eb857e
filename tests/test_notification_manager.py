"""Tests for NotificationManager (kpi_portal/notifications/manager.py)."""

from datetime import datetime

import pytest

from kpi_portal.notifications import BROADCAST_USER_ID, NotificationPriority, NotificationType


def test_create_returns_notification(notification_manager):
    n = notification_manager.create(
        "emp-1",
        "reward",
        "Bonus approved",
        message="Q1 target exceeded",
        priority="high",
        action="View KPI",
        action_url="/kpis/42",
        metadata={"bonus_amount": 1500000},
    )
    assert isinstance(n.id, int)
    assert n.user_id == "emp-1"
    assert n.type is NotificationType.REWARD
    assert n.priority is NotificationPriority.HIGH
    assert n.read is False
    assert n.action_url == "/kpis/42"
    assert n.metadata.bonus_amount == 1500000


def test_create_rejects_unknown_type(notification_manager):
    with pytest.raises(ValueError):
        notification_manager.create("emp-1", "birthday", "Happy birthday")
    assert notification_manager.get_notifications() == []


def test_get_notifications_newest_first(notification_manager):
    notification_manager.create("emp-1", "assigned", "Old", created_at=datetime(2025, 1, 1))
    notification_manager.create("all", "reminder", "New", created_at=datetime(2025, 2, 1))

    titles = [n.title for n in notification_manager.get_notifications()]
    assert titles == ["New", "Old"]
    assert [n.title for n in notification_manager.get_notifications(limit=1)] == ["New"]


def test_unread_count_includes_broadcasts(notification_manager):
    notification_manager.create("emp-1", "assigned", "Mine")
    notification_manager.create(BROADCAST_USER_ID, "deadline", "Everyone")
    notification_manager.create("emp-2", "assigned", "Not mine")

    assert notification_manager.get_unread_count("emp-1") == 2


def test_mark_read(notification_manager):
    n = notification_manager.create("emp-1", "approved", "KPI approved")
    assert notification_manager.mark_read(n.id) is True
    assert notification_manager.get_notifications()[0].read is True
    assert notification_manager.mark_read(9999) is False


@pytest.mark.asyncio
async def test_mark_as_read_async(notification_manager):
    n = notification_manager.create("emp-1", "submitted", "KPI submitted")
    assert await notification_manager.mark_as_read(n.id) is True
    assert await notification_manager.mark_as_read(9999) is False
    assert notification_manager.get_unread_count("emp-1") == 0


def test_mark_all_read_leaves_broadcasts(notification_manager):
    notification_manager.create("emp-1", "assigned", "A")
    notification_manager.create("emp-1", "assigned", "B")
    notification_manager.create(BROADCAST_USER_ID, "reminder", "C")

    assert notification_manager.mark_all_read("emp-1") == 2
    assert notification_manager.get_unread_count("emp-1") == 1
