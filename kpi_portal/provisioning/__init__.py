"""Idempotent database provisioning."""

from .database_setup import (
    DEFAULT_COMPANY,
    DEFAULT_COMPANY_ID,
    REQUIRED_TABLES,
    DatabaseSetup,
    SetupCheckResult,
    SetupSummary,
    run_setup,
    setup_database,
)

__all__ = [
    "DEFAULT_COMPANY",
    "DEFAULT_COMPANY_ID",
    "REQUIRED_TABLES",
    "DatabaseSetup",
    "SetupCheckResult",
    "SetupSummary",
    "run_setup",
    "setup_database",
]
