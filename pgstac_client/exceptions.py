"""
Custom Exception Hierarchy.

Distinguishes between:
1. Contract Violations (programming bugs that need fixing)
2. Runtime failures reported while talking to pgstac

"Not found" is deliberately absent: a missing record is returned as None
by the optional read path, never raised.

Exports:
    ContractViolationError: Wrong types handed to the client
    PgstacError: Base class for runtime client failures
    EncodeError: Request value could not be encoded as JSON
    DecodeError: Server value could not be decoded into the expected type
    QueryError: Connection layer reported a failure
    UnknownError: Column read failed without an identifiable cause
    ConfigurationError: Invalid or missing configuration
"""

from typing import Optional


class ContractViolationError(TypeError):
    """
    Raised when the client is handed something it cannot work with.

    These indicate bugs in the calling code and should not be caught:
        - An unsupported connection object passed to Client
        - A dict passed to Client.search instead of a Search
    """
    pass


class PgstacError(Exception):
    """
    Base class for runtime failures raised by the client.

    Attributes:
        function: Name of the pgstac function being called, if any
    """

    def __init__(self, message: str, function: Optional[str] = None):
        super().__init__(message)
        self.function = function


class EncodeError(PgstacError):
    """
    A request value could not be turned into its JSON wire form.

    Examples:
        - A record dict holding a non-JSON value (a set, an open file)
        - A pydantic model whose serializer fails
    """
    pass


class DecodeError(PgstacError):
    """
    The value returned by pgstac could not be decoded into the expected type.

    Examples:
        - Invalid JSON text
        - JSON null where a collection document was expected
        - A search result missing its context object
    """
    pass


class QueryError(PgstacError):
    """
    The connection layer reported a failure.

    Examples:
        - Unique violation on create_collection
        - update/delete against a record that does not exist
        - Query returned zero rows, or more than one
        - Function result column missing from the row
        - Connection lost

    Attributes:
        sqlstate: PostgreSQL SQLSTATE code when the failure came from the server
    """

    def __init__(
        self,
        message: str,
        function: Optional[str] = None,
        sqlstate: Optional[str] = None
    ):
        super().__init__(message, function=function)
        self.sqlstate = sqlstate


class UnknownError(PgstacError):
    """
    A column read failed and carried no cause.

    Not expected in normal operation.
    """
    pass


class ConfigurationError(Exception):
    """
    Client configuration error.

    Examples:
        - POSTGIS_HOST missing and no POSTGRESQL_CONNECTION_STRING set
        - Non-numeric POSTGIS_PORT
    """
    pass
