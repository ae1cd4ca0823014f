"""
Configuration Package.

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── defaults.py              # Default values
    └── database_config.py       # PostgreSQL/pgstac connection settings

Usage:
    from pgstac_client.config import get_config
    config = get_config()
    dsn = config.connection_string

    from pgstac_client.config import debug_config
    info = debug_config()  # Passwords masked
"""

from typing import Optional

from ..util_logger import LoggerFactory, ComponentType
from .defaults import DatabaseDefaults, TestDefaults
from .database_config import DatabaseConfig

logger = LoggerFactory.create_logger(ComponentType.CONFIG, "Config")


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[DatabaseConfig] = None


def get_config() -> DatabaseConfig:
    """
    Get global configuration singleton, loaded from the environment on first use.

    Raises:
        ConfigurationError: If the environment does not describe a database
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = DatabaseConfig.from_environment()
        logger.debug(f"⚙️ Database configuration loaded: {_config_instance.debug_dict()}")
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Returns:
        Dictionary with configuration values, or an 'error' entry when the
        environment is incomplete
    """
    try:
        return get_config().debug_dict()
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


__all__ = [
    'DatabaseConfig',
    'DatabaseDefaults',
    'TestDefaults',
    'get_config',
    'reset_config',
    'debug_config',
]
