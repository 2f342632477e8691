# Common utilities and shared modules
"""
Shared components used by writers, optimizer, publisher and scheduler:
- Data models and enums (Pydantic schemas)
- Exception hierarchy
- Database utilities
- Logging configuration
- Project configuration
"""

from .config import settings, PROJECT_ROOT, DATA_DIR, load_provider_credentials
from .database import Database, get_database, init_db, reset_database
from .logging import setup_logging

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "DATA_DIR",
    "load_provider_credentials",
    "Database",
    "get_database",
    "init_db",
    "reset_database",
    "setup_logging",
]
