"""Generic table access by logical table name.

Every call returns a :class:`QueryResult` instead of raising on database
errors, so callers can classify failures (missing table, no rows, anything
else) without exception plumbing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import duckdb

from ..manager import DatabaseManager, DictCursor

logger = logging.getLogger(__name__)

# SQLSTATE-style codes carried by StoreError
UNDEFINED_TABLE = "42P01"
NO_ROWS = "P0002"
TOO_MANY_ROWS = "P0003"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class StoreError:
    """Structured error returned by the table store."""

    code: str
    message: str
    details: str | None = None

    @property
    def is_undefined_table(self) -> bool:
        if self.code == UNDEFINED_TABLE:
            return True
        message = self.message.lower()
        return "relation" in message and "does not exist" in message

    @property
    def is_no_rows(self) -> bool:
        return self.code == NO_ROWS

    @classmethod
    def from_exception(cls, exc: duckdb.Error, table: str) -> StoreError:
        text = str(exc)
        if isinstance(exc, duckdb.CatalogException) and "does not exist" in text:
            return cls(UNDEFINED_TABLE, f'relation "{table}" does not exist', details=text)
        return cls(type(exc).__name__, text)


@dataclass(frozen=True)
class QueryResult:
    """Either ``data`` or ``error`` is meaningful, never both."""

    data: Any = None
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def _column_list(columns: str) -> str:
    if columns.strip() == "*":
        return "*"
    return ", ".join(_identifier(col.strip()) for col in columns.split(","))


class TableStore:
    """Read and insert rows of any table by name."""

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.db = db_manager

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> QueryResult:
        """Read up to ``limit`` rows matching equality ``filters``."""
        sql = f"SELECT {_column_list(columns)} FROM {_identifier(table)}"
        params: list[Any] = []
        if filters:
            clauses = []
            for column, value in filters.items():
                clauses.append(f"{_identifier(column)} = ?")
                params.append(value)
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            sql += f" ORDER BY {_identifier(order_by)} {'ASC' if ascending else 'DESC'}"
        if limit is not None:
            if limit < 0:
                raise ValueError(f"limit must be non-negative, got {limit}")
            sql += f" LIMIT {int(limit)}"

        try:
            with self.db.get_read_connection() as conn:
                rows = DictCursor(conn).execute(sql, params).fetchall()
        except duckdb.Error as e:
            logger.debug(f"select on {table} failed: {e}")
            return QueryResult(error=StoreError.from_exception(e, table))
        return QueryResult(data=rows)

    def maybe_single(self, table: str, **kwargs: Any) -> QueryResult:
        """Like select() but yields one row dict, or None when nothing matches."""
        result = self.select(table, **kwargs)
        if not result.ok:
            return result
        if len(result.data) > 1:
            return QueryResult(
                error=StoreError(TOO_MANY_ROWS, f"Expected at most one row from {table}, got {len(result.data)}")
            )
        return QueryResult(data=result.data[0] if result.data else None)

    def insert(self, table: str, row: dict[str, Any], returning: str = "*") -> QueryResult:
        """Insert one row and return it (restricted to ``returning`` columns)."""
        if not row:
            raise ValueError("Cannot insert an empty row")
        columns = [_identifier(col) for col in row]
        placeholders = ", ".join("?" for _ in columns)
        sql = (
            f"INSERT INTO {_identifier(table)} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING {_column_list(returning)}"
        )

        try:
            with self.db.get_connection() as conn:
                rows = DictCursor(conn).execute(sql, list(row.values())).fetchall()
        except duckdb.Error as e:
            return QueryResult(error=StoreError.from_exception(e, table))

        if not rows:
            return QueryResult(error=StoreError(NO_ROWS, f"Insert into {table} returned no rows"))
        return QueryResult(data=rows[0])
