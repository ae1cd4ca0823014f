"""
pgstac Client - typed calls into pgstac's SQL functions.

Every pgstac operation is a function in the pgstac schema that takes
positional parameters and returns one row with one column named after the
function. Client turns typed Python calls into

    SELECT * FROM pgstac.<function>($1, ..., $n)

and decodes the single value that comes back.

Dispatch primitives:
    call_for_value     one JSON value decoded into a type; NULL is an error
    call_for_optional  as above, but SQL NULL means "not found" -> None
    call_for_list      optional list, NULL -> []
    call_for_string    one text value, no JSON decoding
    call_void          run the function, ignore the result

Only call_for_optional turns anything into None, and only a genuine SQL
NULL. JSON that does not fit the expected type is always a DecodeError,
even when that JSON is the literal null.

Usage:
    conn = psycopg.connect(dsn)
    client = Client(conn)
    client.add_collection(collection)
    page = client.search(Search(collections=[collection.id], limit=10))
    client.into_inner().commit()

Exports:
    Client: pgstac client
"""

import json
import math
from functools import lru_cache
from typing import Any, Iterable, List, Optional, Sequence, Type, TypeVar

from psycopg import sql
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from stac_pydantic import Collection, Item

from .config import DatabaseConfig, DatabaseDefaults, get_config
from .exceptions import (
    ContractViolationError,
    DecodeError,
    EncodeError,
    QueryError,
    UnknownError,
)
from .infrastructure.interface_connection import ColumnRead, ColumnState, ProcedureRow
from .infrastructure.postgresql import connect, wrap_connection
from .models import Page, Search
from .util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.CLIENT, "Client")

T = TypeVar("T")


def _non_finite_path(value: Any, path: str = "$") -> Optional[str]:
    """Path of the first NaN or infinity in a dumped value, or None."""
    if isinstance(value, float) and not math.isfinite(value):
        return path
    if isinstance(value, dict):
        for key, item in value.items():
            found = _non_finite_path(item, f"{path}.{key}")
            if found is not None:
                return found
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            found = _non_finite_path(item, f"{path}[{index}]")
            if found is not None:
                return found
    return None


@lru_cache(maxsize=None)
def _type_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


class Client:
    """
    A pgstac client.

    Wraps one connection-like object for its whole lifetime and issues calls
    on it one at a time. It never commits, rolls back or closes: get the
    object back with into_inner() and finalize it yourself.

    Not every pgstac function is exposed; names follow Python conventions
    rather than pgstac's (add_collection calls create_collection).
    """

    def __init__(self, connection: Any, schema: Optional[str] = None):
        """
        Args:
            connection: psycopg.Connection, psycopg.Transaction or IConnection
            schema: Schema holding the pgstac functions (default: pgstac)

        Raises:
            ContractViolationError: If connection is not a supported type
        """
        self._inner = connection
        self._connection = wrap_connection(connection)
        self.schema = schema or DatabaseDefaults.PGSTAC_SCHEMA

    @classmethod
    def connect(cls, config: Optional[DatabaseConfig] = None, autocommit: bool = False) -> "Client":
        """Open a new connection from configuration and wrap it."""
        config = config or get_config()
        return cls(connect(config, autocommit=autocommit), schema=config.pgstac_schema)

    def into_inner(self) -> Any:
        """Return the object this client was created with."""
        return self._inner

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def version(self) -> str:
        """Returns the pgstac version."""
        return self.call_for_string("get_version", [])

    def setting(self, setting: str) -> str:
        """Returns the value of a pgstac setting."""
        return self.call_for_string("get_setting", [setting])

    # =========================================================================
    # COLLECTION OPERATIONS
    # =========================================================================

    def collections(self) -> List[Collection]:
        """Fetches all collections."""
        return self.call_for_list("all_collections", [], Collection)

    def collection(self, id: str) -> Optional[Collection]:
        """Fetches a collection by id, or None if there is no such collection."""
        return self.call_for_optional("get_collection", [id], Collection)

    def add_collection(self, collection: Any) -> None:
        """
        Adds a collection.

        Raises:
            QueryError: If a collection with the same id already exists
        """
        self.call_void("create_collection", [self._encode(collection, "create_collection")])

    def upsert_collection(self, collection: Any) -> None:
        """Adds a collection, or replaces the one with the same id."""
        self.call_void("upsert_collection", [self._encode(collection, "upsert_collection")])

    def update_collection(self, collection: Any) -> None:
        """
        Updates a collection.

        Raises:
            QueryError: If the collection does not exist
        """
        self.call_void("update_collection", [self._encode(collection, "update_collection")])

    def delete_collection(self, id: str) -> None:
        """
        Deletes a collection.

        Raises:
            QueryError: If the collection does not exist
        """
        self.call_void("delete_collection", [id])

    # =========================================================================
    # ITEM OPERATIONS
    # =========================================================================

    def item(self, id: str, collection: Optional[str] = None) -> Optional[Item]:
        """Fetches an item, or None if there is no such item."""
        return self.call_for_optional("get_item", self._item_key(id, collection), Item)

    def add_item(self, item: Any) -> None:
        """
        Adds an item. Its collection must already exist.

        Raises:
            QueryError: If the item exists or its collection does not
        """
        self.call_void("create_item", [self._encode(item, "create_item")])

    def add_items(self, items: Iterable[Any]) -> None:
        """Adds items in one call; atomicity is whatever pgstac provides."""
        self.call_void("create_items", [self._encode_many(items, "create_items")])

    def update_item(self, item: Any) -> None:
        """
        Updates an item.

        Raises:
            QueryError: If the item does not exist
        """
        self.call_void("update_item", [self._encode(item, "update_item")])

    def upsert_item(self, item: Any) -> None:
        """Adds an item, or replaces the one with the same id."""
        self.call_void("upsert_item", [self._encode(item, "upsert_item")])

    def upsert_items(self, items: Iterable[Any]) -> None:
        """Upserts items in one call."""
        self.call_void("upsert_items", [self._encode_many(items, "upsert_items")])

    def delete_item(self, id: str, collection: Optional[str] = None) -> None:
        """
        Deletes an item.

        Raises:
            QueryError: If the item does not exist
        """
        self.call_void("delete_item", self._item_key(id, collection))

    @staticmethod
    def _item_key(id: str, collection: Optional[str]) -> List[Any]:
        return [id] if collection is None else [id, collection]

    # =========================================================================
    # SEARCH
    # =========================================================================

    def search(self, search: Optional[Search] = None) -> Page:
        """
        Searches for items.

        Filtering, sorting, projection and paging all happen in pgstac. To
        continue, search again with search.with_token(page.next_token()).

        Raises:
            ContractViolationError: If search is not a Search
            EncodeError: If the search holds a NaN or infinite number
        """
        if search is None:
            search = Search()
        if not isinstance(search, Search):
            raise ContractViolationError(f"Expected Search, got {type(search).__name__}")

        try:
            path = _non_finite_path(search.model_dump(by_alias=True))
            if path is not None:
                raise EncodeError(
                    f"Could not encode search: out of range float value at {path}",
                    function="search"
                )
            payload = search.to_json()
        except PydanticSerializationError as e:
            raise EncodeError(f"Could not encode search: {e}", function="search") from e

        return self.call_for_value("search", [self._encode(payload, "search")], Page)

    # =========================================================================
    # DISPATCH PRIMITIVES
    # =========================================================================

    def call_for_value(self, function: str, params: Sequence[Any], result_type: Type[T]) -> T:
        """
        Call function and decode its result as result_type.

        Raises:
            DecodeError: If the value does not decode into result_type
            QueryError: If the call fails or returns NULL
            UnknownError: If the column read failed without a cause
        """
        read = self._read(function, params)
        if read.state is ColumnState.WAS_NULL:
            raise QueryError(f"{self.schema}.{function} returned NULL", function=function)
        return self._decode_read(function, read, result_type)

    def call_for_optional(self, function: str, params: Sequence[Any], result_type: Type[T]) -> Optional[T]:
        """
        Call function and decode its result, mapping SQL NULL to None.

        A JSON null value is not absence: it fails to decode like any other
        value that does not fit result_type.

        Raises:
            DecodeError: If a non-NULL value does not decode into result_type
            QueryError: If the call fails
            UnknownError: If the column read failed without a cause
        """
        read = self._read(function, params)
        if read.state is ColumnState.WAS_NULL:
            logger.debug(f"🔍 {self.schema}.{function} returned NULL - not found")
            return None
        return self._decode_read(function, read, result_type)

    def call_for_list(self, function: str, params: Sequence[Any], item_type: Type[T]) -> List[T]:
        """Call function for a JSON array; NULL means no rows and returns []."""
        values = self.call_for_optional(function, params, List[item_type])
        return values if values is not None else []

    def call_for_string(self, function: str, params: Sequence[Any]) -> str:
        """
        Call function and return its result as text, without JSON decoding.

        Raises:
            DecodeError: If the value is not text
            QueryError: If the call fails or returns NULL
        """
        read = self._read(function, params)
        if read.state is ColumnState.WAS_NULL:
            raise QueryError(f"{self.schema}.{function} returned NULL", function=function)
        if read.state is ColumnState.ERROR:
            self._raise_read_error(function, read)
        if not isinstance(read.value, str):
            raise DecodeError(
                f"Expected text from {self.schema}.{function}, got {type(read.value).__name__}",
                function=function
            )
        return read.value

    def call_void(self, function: str, params: Sequence[Any]) -> None:
        """Call function and discard its result; failures still raise."""
        self._query_one(function, params)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _build_query(self, function: str, param_count: int) -> sql.Composed:
        """SELECT * FROM schema.function(%s, ...) with one placeholder per parameter."""
        return sql.SQL("SELECT * FROM {schema}.{function}({params})").format(
            schema=sql.Identifier(self.schema),
            function=sql.Identifier(function),
            params=sql.SQL(", ").join(sql.Placeholder() * param_count),
        )

    def _query_one(self, function: str, params: Sequence[Any]) -> ProcedureRow:
        params = list(params)
        query = self._build_query(function, len(params))
        logger.debug(f"🔄 Calling {self.schema}.{function} with {len(params)} param(s)")
        try:
            return self._connection.query_one(query, params)
        except QueryError as e:
            if e.function is None:
                e.function = function
            raise

    def _read(self, function: str, params: Sequence[Any]) -> ColumnRead:
        return self._query_one(function, params).read(function)

    def _decode_read(self, function: str, read: ColumnRead, result_type: Any) -> Any:
        if read.state is ColumnState.ERROR:
            self._raise_read_error(function, read)

        adapter = _type_adapter(result_type)
        try:
            if isinstance(read.value, (str, bytes, bytearray)):
                return adapter.validate_json(read.value)
            return adapter.validate_python(read.value)
        except ValidationError as e:
            raise DecodeError(
                f"Could not decode result of {self.schema}.{function}: {e}",
                function=function
            ) from e

    def _raise_read_error(self, function: str, read: ColumnRead) -> None:
        if read.error is None:
            raise UnknownError(
                f"Reading the result of {self.schema}.{function} failed with no cause",
                function=function
            )
        raise read.error

    @staticmethod
    def _jsonable(value: Any) -> Any:
        if isinstance(value, BaseModel):
            # mode="json" writes NaN and infinity as null, so check the raw dump first
            path = _non_finite_path(value.model_dump(by_alias=True, exclude_unset=True))
            if path is not None:
                raise ValueError(f"Out of range float value at {path}")
            return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
        if hasattr(value, "to_dict"):
            return value.to_dict()
        return value

    def _encode(self, value: Any, function: Optional[str] = None) -> str:
        """Encode a record (pydantic model, to_dict() object or mapping) as JSON text."""
        try:
            return json.dumps(self._jsonable(value), allow_nan=False)
        except (TypeError, ValueError, PydanticSerializationError) as e:
            raise EncodeError(
                f"Could not encode {type(value).__name__} as JSON: {e}",
                function=function
            ) from e

    def _encode_many(self, values: Iterable[Any], function: Optional[str] = None) -> str:
        try:
            return json.dumps([self._jsonable(value) for value in values], allow_nan=False)
        except (TypeError, ValueError, PydanticSerializationError) as e:
            raise EncodeError(f"Could not encode records as JSON: {e}", function=function) from e
