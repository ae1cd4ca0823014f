"""
Connection Abstract Base Class - the capability the client needs.

The client only ever needs two things from a database connection:
execute one parameterized statement and get exactly one row back, then
read one column of that row while telling a SQL NULL apart from any other
read failure. Anything that provides this can back a Client: a plain
psycopg connection, a psycopg transaction, or a test double.

Column reads return a ColumnRead instead of raising, so the caller
decides what NULL means without inspecting exception causes.

Exports:
    ColumnState: Outcome of a column read
    ColumnRead: Column read result (state + value or error)
    ProcedureRow: One result row with null-aware column reads
    IConnection: Connection capability interface
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from psycopg import sql

from ..exceptions import QueryError


class ColumnState(Enum):
    """Outcome of reading one column from a result row."""

    VALUE = "value"
    WAS_NULL = "was_null"
    ERROR = "error"


class ColumnRead:
    """
    Result of a single column read.

    Exactly one of value/error is meaningful, depending on state. An ERROR
    read may carry no error at all when the cause could not be identified.
    """

    __slots__ = ("state", "value", "error")

    def __init__(
        self,
        state: ColumnState,
        value: Any = None,
        error: Optional[BaseException] = None
    ):
        self.state = state
        self.value = value
        self.error = error

    @classmethod
    def of(cls, value: Any) -> "ColumnRead":
        return cls(ColumnState.VALUE, value=value)

    @classmethod
    def null(cls) -> "ColumnRead":
        return cls(ColumnState.WAS_NULL)

    @classmethod
    def failed(cls, error: Optional[BaseException]) -> "ColumnRead":
        return cls(ColumnState.ERROR, error=error)

    def __repr__(self) -> str:
        if self.state is ColumnState.VALUE:
            return f"ColumnRead(VALUE, {self.value!r})"
        if self.state is ColumnState.ERROR:
            return f"ColumnRead(ERROR, {self.error!r})"
        return "ColumnRead(WAS_NULL)"


class ProcedureRow:
    """
    One row returned by a pgstac function call, keyed by column name.

    None values are SQL NULLs: adapters must hand JSON columns over as raw
    text so that a JSON null never shows up here as None.
    """

    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)

    def read(self, column: str) -> ColumnRead:
        if column not in self._values:
            return ColumnRead.failed(QueryError(
                f"Column '{column}' not found in result row "
                f"(columns: {sorted(self._values)})",
                function=column
            ))
        value = self._values[column]
        if value is None:
            return ColumnRead.null()
        return ColumnRead.of(value)

    def columns(self) -> Sequence[str]:
        return list(self._values)


class IConnection(ABC):
    """
    Connection capability consumed by Client.

    Implementations must translate every driver failure into QueryError and
    must raise QueryError when the statement does not produce exactly one row.
    """

    @abstractmethod
    def query_one(self, query: sql.Composable, params: Sequence[Any]) -> ProcedureRow:
        """Execute query with positional params and return its only row."""
        pass

    @abstractmethod
    def into_inner(self) -> Any:
        """Return the wrapped connection object so the caller can finalize it."""
        pass
