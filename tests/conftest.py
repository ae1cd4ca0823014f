"""
Root conftest.py - sys.path, env vars, shared fixtures.

Sets up the test environment so pgstac_client can be imported and its
configuration loaded without a real database.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'pgstac_client' and 'tests' are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables so get_config() succeeds.

    Real values (e.g. from CI) win over these defaults.
    """
    defaults = {
        "POSTGIS_HOST": "localhost",
        "POSTGIS_DATABASE": "postgis",
        "PGSTAC_SCHEMA": "pgstac",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Every test starts without a cached configuration."""
    from pgstac_client.config import reset_config
    reset_config()
    yield
    reset_config()
