"""
Unit test fixtures - scripted connection double, factory-built documents.
"""

import json
from typing import Any, List, Sequence

import pytest

from pgstac_client import Client
from pgstac_client.infrastructure import IConnection, ProcedureRow
from tests.factories.stac_factories import make_collection, make_item


class FakeConnection(IConnection):
    """
    IConnection double that records every call and replays scripted rows.

    Scripted responses are consumed in order. A response may be a dict (the
    row), a ProcedureRow, or an exception instance to raise. With nothing
    scripted, every call returns an empty row.
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self._responses: List[Any] = []

    def respond(self, response: Any) -> "FakeConnection":
        self._responses.append(response)
        return self

    def respond_value(self, function: str, value: Any) -> "FakeConnection":
        """Script a single-column row the way the psycopg adapters produce it."""
        return self.respond({function: value})

    def respond_json(self, function: str, document: Any) -> "FakeConnection":
        """Script a JSON column, delivered as raw text."""
        return self.respond({function: json.dumps(document)})

    def query_one(self, query, params: Sequence[Any]) -> ProcedureRow:
        self.calls.append((query.as_string(None), list(params)))
        response = self._responses.pop(0) if self._responses else {}
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, ProcedureRow):
            return response
        return ProcedureRow(response)

    def into_inner(self) -> "FakeConnection":
        return self

    @property
    def last_query(self) -> str:
        return self.calls[-1][0]

    @property
    def last_params(self) -> List[Any]:
        return self.calls[-1][1]


@pytest.fixture
def fake_connection():
    """Fresh scripted connection."""
    return FakeConnection()


@pytest.fixture
def client(fake_connection):
    """Client over the scripted connection."""
    return Client(fake_connection)


@pytest.fixture
def collection_data():
    """Return randomized collection document."""
    return make_collection()


@pytest.fixture
def item_data(collection_data):
    """Return randomized item document in collection_data."""
    return make_item(collection=collection_data["id"])
