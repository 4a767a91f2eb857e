#!/usr/bin/env python
"""
Check the KPI Portal database schema and seed the default company
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kpi_portal.config import config
from kpi_portal.database.manager import DatabaseManager
from kpi_portal.database.repos import TableStore
from kpi_portal.provisioning import SetupSummary, run_setup
from kpi_portal.utils.logger import setup_logging


def setup_database():
    """Run the setup checks and exit non-zero if any failed"""
    setup_logging()
    print("Setting up KPI Portal database...")
    print(f"   Database Path: {config.DB_PATH}")

    try:
        results = run_setup(TableStore(DatabaseManager()))
    except Exception as e:
        print(f"Database setup failed: {e}")
        sys.exit(1)

    summary = SetupSummary.from_results(results)
    print()
    for line in summary.format_lines():
        print(line)
    sys.exit(0 if summary.ok else 1)


if __name__ == "__main__":
    setup_database()
