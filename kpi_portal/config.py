"""
Zero-Configuration management for KPI Portal
All settings have sensible defaults - no .env required
"""
import os
from pathlib import Path


class Config:
    """Application configuration with zero-config defaults"""

    # Application paths (auto-created)
    BASE_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = BASE_DIR / 'data'
    LOGS_DIR: Path = BASE_DIR / 'logs'
    DB_PATH: Path = DATA_DIR / 'kpi_portal.duckdb'

    # Upper bound for a single data store call during provisioning (seconds)
    STORE_CALL_TIMEOUT: float = 10.0

    # Notification summary defaults
    RECENT_NOTIFICATIONS_LIMIT: int = 5

    # Logging defaults
    LOG_LEVEL: str = 'INFO'

    def __init__(self):
        """Initialize configuration"""
        # Create necessary directories
        self.DATA_DIR.mkdir(exist_ok=True, parents=True)
        self.LOGS_DIR.mkdir(exist_ok=True, parents=True)

        # Optional: Override with environment variables if present
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load any environment variable overrides (optional)"""
        if os.getenv('DB_PATH'):
            self.DB_PATH = Path(os.getenv('DB_PATH'))
        if os.getenv('LOG_LEVEL'):
            self.LOG_LEVEL = os.getenv('LOG_LEVEL')
        if os.getenv('STORE_CALL_TIMEOUT'):
            self.STORE_CALL_TIMEOUT = float(os.getenv('STORE_CALL_TIMEOUT'))
        if os.getenv('RECENT_NOTIFICATIONS_LIMIT'):
            self.RECENT_NOTIFICATIONS_LIMIT = int(os.getenv('RECENT_NOTIFICATIONS_LIMIT'))


# Create singleton instance
config = Config()
