"""
Runtime Configuration

Reads service settings from environment variables once at import time.
Every value has a default so the service starts without any configuration,
backed by a SQLite file in the user's home directory.

Environment variables:
- PRODUCT_CATALOG_DATABASE_URL: SQLAlchemy database URL
- PRODUCT_CATALOG_SQL_ECHO: Log emitted SQL ('true'/'1'/'yes')
- PRODUCT_CATALOG_LOG_DIR: Directory for the rotating log file
- PRODUCT_CATALOG_LOG_LEVEL: Root log level (DEBUG, INFO, ...)
- PRODUCT_CATALOG_CORS_ORIGINS: Comma-separated allowed origins
"""
import os
import logging
from pathlib import Path

from exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = 'PRODUCT_CATALOG_'

DATA_DIR = Path.home() / ".product_catalog"

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _env(name: str, default: str) -> str:
    return os.environ.get(f'{ENV_PREFIX}{name}', default)


def _env_flag(name: str, default: bool = False) -> bool:
    value = _env(name, 'true' if default else 'false').lower()
    return value in ('true', '1', 'yes')


DATABASE_URL = _env('DATABASE_URL', f"sqlite:///{DATA_DIR / 'catalog.db'}")
SQL_ECHO = _env_flag('SQL_ECHO')
LOG_DIR = Path(_env('LOG_DIR', str(DATA_DIR / "logs")))
LOG_LEVEL = _env('LOG_LEVEL', 'INFO').upper()
CORS_ORIGINS = [origin.strip() for origin in _env('CORS_ORIGINS', '*').split(',') if origin.strip()]


def validate_settings() -> None:
    """
    Validate the loaded settings.

    Raises:
        ConfigurationError: If a setting is missing or has an unusable value
    """
    missing_keys = []
    if not DATABASE_URL.strip():
        missing_keys.append(f'{ENV_PREFIX}DATABASE_URL')

    if missing_keys:
        raise ConfigurationError(
            f"Configuration is missing required keys: {', '.join(missing_keys)}",
            missing_keys=missing_keys
        )

    if LOG_LEVEL not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level '{LOG_LEVEL}', expected one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    logger.debug(f"Settings validated (database: {DATABASE_URL.split('://')[0]})")
