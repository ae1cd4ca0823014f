"""
Infrastructure Package - connection capability and its psycopg adapters.

Exports:
    IConnection: Connection capability interface
    ProcedureRow, ColumnRead, ColumnState: Null-aware row access
    PsycopgConnection, PsycopgTransaction: psycopg adapters
    wrap_connection: Pick the adapter for a connection-like object
    connect: Open a psycopg connection from configuration
"""

from .interface_connection import ColumnRead, ColumnState, IConnection, ProcedureRow
from .postgresql import PsycopgConnection, PsycopgTransaction, connect, wrap_connection

__all__ = [
    'ColumnRead',
    'ColumnState',
    'IConnection',
    'ProcedureRow',
    'PsycopgConnection',
    'PsycopgTransaction',
    'connect',
    'wrap_connection',
]
