"""
Database setup for KPI Portal.

Checks that every application table exists and makes sure the default
company record is present, creating it with a fixed id when it is not.
The routine never drops or updates anything, so running it repeatedly
converges on the same database state.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable

from ..config import config
from ..database.manager import APPLICATION_TABLES

logger = logging.getLogger(__name__)

REQUIRED_TABLES = APPLICATION_TABLES

COMPANY_TABLE = "companies"
DEFAULT_COMPANY_CHECK = "default_company"

# Shared across environments so every database converges on the same record
DEFAULT_COMPANY_ID = "550e8400-e29b-41d4-a716-446655440000"
DEFAULT_COMPANY = {
    "id": DEFAULT_COMPANY_ID,
    "name": "Y99 Company",
    "code": "Y99",
    "description": "Công ty Y99 - Công ty mặc định",
    "email": "contact@y99.vn",
    "phone": "+84 123 456 789",
    "address": "Việt Nam",
    "is_active": True,
}

TABLE_MISSING = "Table does not exist"
TIMED_OUT = "timed out"


@dataclass(frozen=True)
class SetupCheckResult:
    """Outcome of one setup check."""

    name: str
    exists: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "exists": self.exists, "error": self.error}


@dataclass(frozen=True)
class SetupSummary:
    """Pass/fail counts derived from a list of check results."""

    total: int
    successful: int
    failures: tuple[SetupCheckResult, ...]

    @classmethod
    def from_results(cls, results: list[SetupCheckResult]) -> SetupSummary:
        failures = tuple(r for r in results if not r.exists)
        return cls(total=len(results), successful=len(results) - len(failures), failures=failures)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def format_lines(self) -> list[str]:
        lines = [
            "Setup Summary:",
            "================",
            f"Total Checks: {self.total}",
            f"Successful: {self.successful}",
            f"Failed: {self.failed}",
        ]
        if self.failures:
            lines.append("")
            lines.append("Missing Tables/Components:")
            lines.extend(f"- {r.name}: {r.error or 'Missing'}" for r in self.failures)
            lines.append("")
            lines.append("To fix missing tables, apply the schema:")
            lines.append("  kpi-portal migrate")
        return lines


class DatabaseSetup:
    """Runs the table checks and the default company check in order.

    ``store`` needs ``select``, ``maybe_single`` and ``insert`` with the
    signatures of :class:`kpi_portal.database.repos.TableStore`. Each call
    runs on a worker pool owned by the run and is abandoned after
    ``call_timeout`` seconds. The pool is released without joining its
    threads, so a hung call cannot hold up the caller once ``run()`` returns.
    """

    def __init__(
        self,
        store: Any,
        required_tables: tuple[str, ...] = REQUIRED_TABLES,
        call_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.required_tables = tuple(required_tables)
        self.call_timeout = call_timeout if call_timeout is not None else config.STORE_CALL_TIMEOUT
        self.results: list[SetupCheckResult] = []
        self._executor: ThreadPoolExecutor | None = None

    def _add_result(self, name: str, exists: bool, error: str | None = None) -> None:
        self.results.append(SetupCheckResult(name, exists, error))
        if exists:
            logger.info(f"Check {name}: OK")
        else:
            logger.warning(f"Check {name}: FAILED ({error})")

    async def _call(self, method: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, functools.partial(method, *args, **kwargs))
        return await asyncio.wait_for(future, timeout=self.call_timeout)

    async def run(self) -> list[SetupCheckResult]:
        """Run every check and return the results in call order."""
        self.results = []
        logger.info("Starting database setup")

        # One worker per store call of the run
        self._executor = ThreadPoolExecutor(
            max_workers=len(self.required_tables) + 2, thread_name_prefix="db-setup"
        )
        try:
            await self.check_tables()
            await self.ensure_default_company()
        except Exception as e:
            logger.error(f"Database setup failed: {e}", exc_info=True)
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

        summary = SetupSummary.from_results(self.results)
        logger.info(
            f"Database setup complete: {summary.successful}/{summary.total} checks passed"
        )
        return list(self.results)

    async def check_tables(self) -> None:
        logger.info("Checking required tables")
        for table in self.required_tables:
            await self.check_table(table)

    async def check_table(self, table: str) -> None:
        try:
            result = await self._call(self.store.select, table, limit=1)
        except asyncio.TimeoutError:
            self._add_result(table, False, TIMED_OUT)
            return
        except Exception as e:
            self._add_result(table, False, str(e))
            return

        if result.error is None:
            self._add_result(table, True)
        elif result.error.is_undefined_table:
            self._add_result(table, False, TABLE_MISSING)
        else:
            self._add_result(table, False, result.error.message)

    async def ensure_default_company(self) -> None:
        logger.info("Ensuring default company exists")
        try:
            existing = await self._call(
                self.store.maybe_single,
                COMPANY_TABLE,
                columns="id",
                filters={"is_active": True},
                order_by="created_at",
                ascending=True,
                limit=1,
            )
            # Existence unknown: creating now could duplicate the record
            if existing.error is not None and not existing.error.is_no_rows:
                self._add_result(DEFAULT_COMPANY_CHECK, False, existing.error.message)
                return

            if existing.error is None and existing.data:
                self._add_result(DEFAULT_COMPANY_CHECK, True)
                logger.info(f"Default company exists: {existing.data['id']}")
                return

            created = await self._call(self.store.insert, COMPANY_TABLE, DEFAULT_COMPANY, returning="id")
            if created.error is not None:
                self._add_result(DEFAULT_COMPANY_CHECK, False, created.error.message)
            else:
                self._add_result(DEFAULT_COMPANY_CHECK, True)
                logger.info(f"Created default company: {created.data['id']}")
        except asyncio.TimeoutError:
            self._add_result(DEFAULT_COMPANY_CHECK, False, TIMED_OUT)
        except Exception as e:
            self._add_result(DEFAULT_COMPANY_CHECK, False, str(e))


async def setup_database(store: Any, **kwargs: Any) -> list[SetupCheckResult]:
    """Run the database setup against ``store``."""
    return await DatabaseSetup(store, **kwargs).run()


def run_setup(store: Any, **kwargs: Any) -> list[SetupCheckResult]:
    """Blocking wrapper around :func:`setup_database` for scripts and the CLI."""
    return asyncio.run(setup_database(store, **kwargs))
