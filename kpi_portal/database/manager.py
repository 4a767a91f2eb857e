"""
Database Manager for KPI Portal
Owns the DuckDB connection and applies schema migrations on request
"""
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import duckdb

from ..config import config

logger = logging.getLogger(__name__)

# Application tables in schema order, shared by table_counts() and the setup checks
APPLICATION_TABLES = (
    'companies',
    'roles',
    'departments',
    'employees',
    'kpis',
    'kpi_records',
    'notifications',
)


class DictCursor:
    """Wrap a DuckDB cursor so fetched rows come back as dicts."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._columns: List[str] = []

    def execute(self, sql: str, params: Any = None) -> "DictCursor":
        self._cursor.execute(sql, params or [])
        description = self._cursor.description or []
        self._columns = [col[0] for col in description]
        return self

    def fetchone(self) -> Optional[Dict[str, Any]]:
        row = self._cursor.fetchone()
        return dict(zip(self._columns, row)) if row is not None else None

    def fetchall(self) -> List[Dict[str, Any]]:
        return [dict(zip(self._columns, row)) for row in self._cursor.fetchall()]


class DatabaseManager:
    """
    Database manager for the KPI Portal DuckDB file
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize database manager

        Args:
            db_path: Path to database file
        """
        self.db_path = Path(db_path) if db_path is not None else config.DB_PATH
        self._conn = None
        self._lock = threading.Lock()

        # Create database directory if needed
        self.db_path.parent.mkdir(exist_ok=True, parents=True)

    def _connection(self) -> duckdb.DuckDBPyConnection:
        with self._lock:
            if self._conn is None:
                self._conn = duckdb.connect(str(self.db_path))
                logger.debug(f"Opened DuckDB database at {self.db_path}")
            return self._conn

    @contextmanager
    def get_connection(self) -> Iterator[duckdb.DuckDBPyConnection]:
        """Context manager yielding a cursor for read-write work"""
        cursor = None
        try:
            # One cursor per use: DuckDB connections must not be shared across threads
            cursor = self._connection().cursor()
            yield cursor
            cursor.commit()
        except Exception as e:
            if cursor is not None:
                try:
                    cursor.rollback()
                except duckdb.Error:
                    pass
            logger.error(f"Database error: {e}")
            raise
        finally:
            if cursor is not None:
                cursor.close()

    @contextmanager
    def get_read_connection(self) -> Iterator[duckdb.DuckDBPyConnection]:
        """Context manager yielding a cursor for queries that write nothing"""
        cursor = self._connection().cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def migrate(self) -> int:
        """Apply pending schema migrations. Returns count applied."""
        from .migrations.runner import MigrationRunner

        with self.get_connection() as conn:
            return MigrationRunner(conn).run_pending()

    def existing_tables(self) -> List[str]:
        """Names of the tables currently present in the main schema"""
        with self.get_read_connection() as conn:
            rows = conn.execute(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = 'main' ORDER BY table_name"
            ).fetchall()
            return [row[0] for row in rows]

    def table_counts(self) -> Dict[str, Optional[int]]:
        """Row counts for the application tables (None when a table is missing)"""
        present = set(self.existing_tables())
        counts: Dict[str, Optional[int]] = {}
        with self.get_read_connection() as conn:
            for table in APPLICATION_TABLES:
                if table not in present:
                    counts[table] = None
                    continue
                counts[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        return counts

    def close(self) -> None:
        """Close the shared connection"""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __str__(self) -> str:
        """String representation"""
        return f"DatabaseManager(path={self.db_path})"
