"""Repository classes for database access."""

from .tables import NO_ROWS, TOO_MANY_ROWS, UNDEFINED_TABLE, QueryResult, StoreError, TableStore

__all__ = [
    "TableStore",
    "QueryResult",
    "StoreError",
    "UNDEFINED_TABLE",
    "NO_ROWS",
    "TOO_MANY_ROWS",
]
