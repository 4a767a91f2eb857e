"""
Tests for DatabaseManager and the migration runner.
"""

import duckdb
import pytest

from kpi_portal.database.manager import APPLICATION_TABLES, DictCursor
from kpi_portal.database.migrations.runner import MIGRATIONS, MigrationRunner


def test_new_database_has_no_tables(tmp_db):
    """Connecting does not apply the schema."""
    assert tmp_db.existing_tables() == []


def test_migrate_creates_tables(tmp_db):
    applied = tmp_db.migrate()
    assert applied == len(MIGRATIONS)

    tables = set(tmp_db.existing_tables())
    assert set(APPLICATION_TABLES).issubset(tables), f"Missing tables: {set(APPLICATION_TABLES) - tables}"
    assert "schema_version" in tables


def test_migrate_is_idempotent(tmp_db):
    tmp_db.migrate()
    assert tmp_db.migrate() == 0

    with tmp_db.get_read_connection() as conn:
        runner = MigrationRunner(conn)
        assert runner.get_current_version() == len(MIGRATIONS)
        assert runner.get_applied_versions() == set(range(1, len(MIGRATIONS) + 1))


def test_table_counts(provisioned_db):
    counts = provisioned_db.table_counts()
    assert tuple(counts) == APPLICATION_TABLES
    assert all(count == 0 for count in counts.values())


def test_table_counts_reports_missing_tables(tmp_db):
    counts = tmp_db.table_counts()
    assert all(count is None for count in counts.values())


def test_get_connection_reraises_errors(tmp_db):
    with pytest.raises(duckdb.CatalogException):
        with tmp_db.get_connection() as conn:
            conn.execute("SELECT * FROM nowhere")


def test_dict_cursor_returns_dicts(provisioned_db):
    with provisioned_db.get_connection() as conn:
        conn.execute("INSERT INTO roles (name, code) VALUES ('Manager', 'MGR')")
        cursor = DictCursor(conn)
        row = cursor.execute("SELECT name, code FROM roles WHERE code = ?", ["MGR"]).fetchone()
        assert row == {"name": "Manager", "code": "MGR"}
        assert cursor.execute("SELECT name FROM roles WHERE code = 'none'").fetchone() is None


def test_close_and_reopen(provisioned_db):
    provisioned_db.close()
    # The next call opens a fresh connection on the same file
    assert "companies" in provisioned_db.existing_tables()
