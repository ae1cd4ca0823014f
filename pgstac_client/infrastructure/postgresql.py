"""
PostgreSQL Connection Adapters - psycopg implementations of IConnection.

Architecture:
    IConnection (abstract capability)
        ↓
    _PsycopgAdapter (cursor handling, error translation)
        ↓
    PsycopgConnection (plain connection), PsycopgTransaction (transaction block)

Key Features:
- dict_row cursors, so columns are read by the function's name
- JSON columns are loaded as raw text: SQL NULL stays None, JSON null stays "null"
- psycopg errors translated to QueryError, original chained as __cause__
- Nothing here commits, rolls back or closes; the caller owns the connection

Exports:
    PsycopgConnection: Adapter for psycopg.Connection
    PsycopgTransaction: Adapter for psycopg.Transaction
    wrap_connection: Pick the adapter for a connection-like object
    connect: Open a psycopg connection from DatabaseConfig
"""

from abc import abstractmethod
from typing import Any, Optional, Sequence

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import set_json_loads

from ..config import DatabaseConfig, get_config
from ..exceptions import ContractViolationError, QueryError
from ..util_logger import LoggerFactory, ComponentType
from .interface_connection import IConnection, ProcedureRow

logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "PostgreSQL")


def _raw_json(data: Any) -> str:
    """JSON loader that keeps the document as text for the client to decode."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data).decode("utf-8")
    return data


# ============================================================================
# BASE ADAPTER
# ============================================================================

class _PsycopgAdapter(IConnection):
    """Shared query handling for the psycopg adapters."""

    @abstractmethod
    def _connection(self) -> psycopg.Connection:
        pass

    def query_one(self, query: sql.Composable, params: Sequence[Any]) -> ProcedureRow:
        conn = self._connection()
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                set_json_loads(_raw_json, cur)
                cur.execute(query, list(params))
                rows = cur.fetchmany(2)
        except psycopg.Error as e:
            logger.error(f"❌ PostgreSQL error: {e}")
            logger.debug(f"   Error type: {type(e).__name__}, sqlstate: {e.sqlstate}")
            raise QueryError(str(e).strip(), sqlstate=e.sqlstate) from e

        if len(rows) != 1:
            found = "no rows" if not rows else "more than one row"
            raise QueryError(f"Expected exactly one row, query returned {found}")

        return ProcedureRow(rows[0])


# ============================================================================
# CONCRETE ADAPTERS
# ============================================================================

class PsycopgConnection(_PsycopgAdapter):
    """
    Adapter for a plain psycopg connection.

    With autocommit off, psycopg opens a transaction on the first call and
    the caller commits or rolls back through into_inner().
    """

    def __init__(self, connection: psycopg.Connection):
        self._conn = connection

    def _connection(self) -> psycopg.Connection:
        return self._conn

    def into_inner(self) -> psycopg.Connection:
        return self._conn


class PsycopgTransaction(_PsycopgAdapter):
    """
    Adapter for a psycopg transaction block.

    Usage:
        with conn.transaction() as tx:
            client = Client(tx)
            client.add_collection(collection)
        # committed on exit; raise psycopg.Rollback inside the block to undo
    """

    def __init__(self, transaction: psycopg.Transaction):
        self._tx = transaction

    def _connection(self) -> psycopg.Connection:
        return self._tx.connection

    def into_inner(self) -> psycopg.Transaction:
        return self._tx


def wrap_connection(connection: Any) -> IConnection:
    """
    Pick the IConnection adapter for a connection-like object.

    Raises:
        ContractViolationError: For anything that is not an IConnection,
            psycopg.Connection or psycopg.Transaction
    """
    if isinstance(connection, IConnection):
        return connection
    if isinstance(connection, psycopg.Transaction):
        return PsycopgTransaction(connection)
    if isinstance(connection, psycopg.Connection):
        return PsycopgConnection(connection)
    raise ContractViolationError(
        f"Expected psycopg.Connection, psycopg.Transaction or IConnection, "
        f"got {type(connection).__name__}"
    )


def connect(config: Optional[DatabaseConfig] = None, autocommit: bool = False) -> psycopg.Connection:
    """
    Open a psycopg connection to the pgstac database.

    Args:
        config: Connection settings (uses get_config() if not provided)
        autocommit: Open the connection in autocommit mode

    Returns:
        New psycopg.Connection; closing it is up to the caller

    Raises:
        QueryError: If the connection cannot be established
        ConfigurationError: If the configuration is incomplete
    """
    config = config or get_config()
    conn_string = config.connection_string

    logger.debug(f"🔗 Connecting to PostgreSQL: {config.host or 'connection string override'}")
    try:
        conn = psycopg.connect(
            conn_string,
            autocommit=autocommit,
            connect_timeout=config.connection_timeout_seconds
        )
    except psycopg.Error as e:
        logger.error(f"❌ PostgreSQL connection error: {e}")
        raise QueryError(f"Could not connect to PostgreSQL: {e}", sqlstate=e.sqlstate) from e

    logger.debug("✅ PostgreSQL connection established")
    return conn
