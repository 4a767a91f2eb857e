"""Tests for the click command line (kpi_portal/cli.py)."""

from datetime import datetime
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from kpi_portal.cli import cli
from kpi_portal.database.manager import DatabaseManager
from kpi_portal.notifications import NotificationManager


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("kpi_portal.cli.setup_logging"):
        yield


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "cli.duckdb"


def test_setup_db_on_empty_database_fails(runner, db_file):
    result = runner.invoke(cli, ["setup-db", "--db-path", str(db_file)])

    assert result.exit_code == 1
    assert "Table does not exist" in result.output
    assert "kpi-portal migrate" in result.output


def test_migrate_then_setup_db_succeeds(runner, db_file):
    result = runner.invoke(cli, ["migrate", "--db-path", str(db_file)])
    assert result.exit_code == 0
    assert "Applied 5 migration(s)" in result.output
    assert "companies: 0" in result.output

    result = runner.invoke(cli, ["setup-db", "--db-path", str(db_file)])
    assert result.exit_code == 0, result.output
    assert "Failed: 0" in result.output

    # Second run is a no-op and still passes
    result = runner.invoke(cli, ["setup-db", "--db-path", str(db_file)])
    assert result.exit_code == 0


def test_setup_db_unexpected_failure_exits_one(runner, db_file):
    with patch("kpi_portal.cli.run_setup", side_effect=RuntimeError("no store")):
        result = runner.invoke(cli, ["setup-db", "--db-path", str(db_file)])

    assert result.exit_code == 1
    assert "Database setup failed: no store" in result.output
    assert "Traceback" not in result.output


@pytest.fixture
def seeded_db(db_file):
    db = DatabaseManager(db_file)
    db.migrate()
    manager = NotificationManager(db)
    manager.create("emp-1", "assigned", "New KPI assigned", message="Sales Q2",
                   action="Open", action_url="https://kpi.example/kpis/7",
                   created_at=datetime(2025, 4, 1, 8, 0))
    manager.create("all", "reminder", "Submit your KPIs", created_at=datetime(2025, 4, 2, 8, 0))
    manager.create("emp-2", "penalty", "Someone else's penalty")
    return db


def test_notifications_lists_summary(runner, db_file, seeded_db):
    result = runner.invoke(cli, ["notifications", "--db-path", str(db_file), "--user", "emp-1"])

    assert result.exit_code == 0, result.output
    assert "You have 2 unread notifications" in result.output
    assert "Submit your KPIs" in result.output
    assert "New KPI assigned" in result.output
    assert "Someone else's penalty" not in result.output


def test_notifications_open_marks_read_and_navigates(runner, db_file, seeded_db):
    target = next(n for n in NotificationManager(seeded_db).get_notifications() if n.title == "New KPI assigned")

    with patch("kpi_portal.notifications.summary.webbrowser.open") as mock_open:
        result = runner.invoke(
            cli, ["notifications", "--db-path", str(db_file), "--user", "emp-1", "--open", str(target.id)]
        )

    assert result.exit_code == 0, result.output
    mock_open.assert_called_once_with("https://kpi.example/kpis/7")
    assert NotificationManager(seeded_db).get_unread_count("emp-1") == 1


def test_notifications_open_unknown_id(runner, db_file, seeded_db):
    result = runner.invoke(cli, ["notifications", "--db-path", str(db_file), "--user", "emp-1", "--open", "999"])
    assert result.exit_code == 1
    assert "not found" in result.output
