"""
Shared pytest fixtures for KPI Portal tests.
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from kpi_portal.database.repos import QueryResult


@pytest.fixture
def tmp_db(tmp_path):
    """Fresh DuckDB database with no schema applied."""
    from kpi_portal.database.manager import DatabaseManager

    db = DatabaseManager(db_path=tmp_path / "test.duckdb")
    yield db
    db.close()


@pytest.fixture
def provisioned_db(tmp_db):
    """Database with every migration applied."""
    tmp_db.migrate()
    return tmp_db


@pytest.fixture
def store(provisioned_db):
    from kpi_portal.database.repos import TableStore

    return TableStore(provisioned_db)


@pytest.fixture
def notification_manager(provisioned_db):
    from kpi_portal.notifications import NotificationManager

    return NotificationManager(provisioned_db)


@pytest.fixture
def mock_store():
    """Store double where every table exists and no company is seeded yet."""
    mock = MagicMock()
    mock.select.return_value = QueryResult(data=[])
    mock.maybe_single.return_value = QueryResult(data=None)
    mock.insert.return_value = QueryResult(data={"id": "550e8400-e29b-41d4-a716-446655440000"})
    return mock


@pytest.fixture
def base_time():
    return datetime(2025, 3, 1, 9, 0, 0)


@pytest.fixture
def make_notification(base_time):
    """Factory for Notification models with sensible defaults."""
    from kpi_portal.notifications import Notification

    def _make(id, user_id="u1", read=False, minutes=0, **kwargs):
        fields = {
            "id": id,
            "user_id": user_id,
            "type": "assigned",
            "title": f"Notification {id}",
            "message": "KPI assigned",
            "read": read,
            "created_at": base_time + timedelta(minutes=minutes),
        }
        fields.update(kwargs)
        return Notification(**fields)

    return _make
