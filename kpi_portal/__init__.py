"""
KPI Portal - database provisioning and notification summary
"""

__version__ = "1.0.0"
__author__ = "KPI Portal Team"

from .database.manager import DatabaseManager
from .database.repos import TableStore
from .notifications import NotificationManager, NotificationSummary
from .provisioning import run_setup, setup_database

__all__ = [
    "DatabaseManager",
    "TableStore",
    "NotificationManager",
    "NotificationSummary",
    "run_setup",
    "setup_database",
]
