"""
Integration fixtures - live pgstac database, one rolled-back transaction per test.

Connects to PGSTAC_TEST_DSN (default: TestDefaults.DSN, the pgstac docker
image's credentials). Every test in this directory is skipped when the
database cannot be reached.
"""

import os
from contextlib import contextmanager

import psycopg
import pytest

from pgstac_client import Client
from pgstac_client.config import TestDefaults


def pytest_collection_modifyitems(items):
    for item in items:
        if "tests/integration" in item.nodeid.replace("\\", "/"):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def pgstac_connection():
    """One connection for the whole run, skipped when no database answers."""
    dsn = os.environ.get("PGSTAC_TEST_DSN", TestDefaults.DSN)
    try:
        conn = psycopg.connect(dsn, connect_timeout=3)
    except psycopg.OperationalError as e:
        pytest.skip(f"pgstac database not available: {e}")
    yield conn
    conn.close()


@pytest.fixture
def transaction(pgstac_connection):
    """Transaction rolled back at the end of the test, whatever happens."""
    with pgstac_connection.transaction(force_rollback=True) as tx:
        yield tx


@pytest.fixture
def client(transaction):
    """Client over the test's transaction."""
    return Client(transaction)


@pytest.fixture
def savepoint(transaction):
    """
    Run a call expected to fail without poisoning the test transaction.

        with pytest.raises(QueryError):
            with savepoint():
                client.add_collection(duplicate)
    """
    @contextmanager
    def _savepoint():
        with transaction.connection.transaction():
            yield
    return _savepoint
