"""
Search Request Models.

Builds the single JSON argument passed to pgstac's search() function.

pgstac treats an explicit null differently from a missing key for some
parameters, so every model here drops empty values when serialized instead
of emitting null. An empty request encodes to {} and lets the server apply
all of its defaults.

Exports:
    Fields: Include/exclude projection of returned features
    SortBy: One sort key
    Search: Full search request
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator, model_serializer
from geojson_pydantic.geometries import Geometry

from .enums import SortDirection


def _is_empty(value: Any) -> bool:
    """None, '', [] and {} all mean 'unconstrained'."""
    if value is None:
        return True
    if isinstance(value, (str, list, dict)):
        return len(value) == 0
    return False


def _drop_empty(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if not _is_empty(value)}


class Fields(BaseModel):
    """
    Fields to include in or exclude from returned features.

    Entries are property paths such as "properties.eo:cloud_cover".
    """

    include: List[str] = Field(default_factory=list, description="Paths to include")
    exclude: List[str] = Field(default_factory=list, description="Paths to exclude")

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        return _drop_empty(handler(self))


class SortBy(BaseModel):
    """
    Sort key. The field name is not checked here; pgstac rejects unknown ones.
    """

    field: str = Field(..., description="Property path to sort on")
    direction: SortDirection = Field(default=SortDirection.ASC, description="asc or desc")

    @classmethod
    def asc(cls, field: str) -> "SortBy":
        return cls(field=field, direction=SortDirection.ASC)

    @classmethod
    def desc(cls, field: str) -> "SortBy":
        return cls(field=field, direction=SortDirection.DESC)


class Search(BaseModel):
    """
    A pgstac search request.

    Every field defaults to "unconstrained" and is left out of the encoded
    request while empty. Build one fresh per call:

        search = Search(collections=["landsat"], limit=10)
        page = client.search(search)
        if page.next_token():
            page = client.search(search.with_token(page.next_token()))
    """

    model_config = ConfigDict(populate_by_name=True)

    ids: List[str] = Field(
        default_factory=list,
        description="Return only items with these ids"
    )
    collections: List[str] = Field(
        default_factory=list,
        description="Return only items belonging to one of these collections"
    )
    bbox: List[FiniteFloat] = Field(
        default_factory=list,
        description="minx, miny, maxx, maxy (or 6 values with min/max z)"
    )
    datetime: str = Field(
        default="",
        description="RFC 3339 instant, or start/end interval with '..' for open ends"
    )
    intersects: Optional[Geometry] = Field(
        default=None,
        description="GeoJSON geometry that returned items must intersect"
    )
    limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="Page size; the server default applies when unset"
    )
    token: Optional[str] = Field(
        default=None,
        description="Pagination token taken from Page.next_token() or Page.prev_token()"
    )
    fields: Optional[Fields] = Field(
        default=None,
        description="Projection of returned features"
    )
    sortby: List[SortBy] = Field(
        default_factory=list,
        description="Sort keys, primary first"
    )
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Filter expression tree (e.g. CQL2-JSON)"
    )
    filter_lang: Optional[str] = Field(
        default=None,
        alias="filter-lang",
        description="Language of the filter expression, e.g. cql2-json"
    )

    @field_validator('bbox')
    @classmethod
    def validate_bbox(cls, v):
        if v and len(v) not in (4, 6):
            raise ValueError(f"bbox must have 4 or 6 values, got {len(v)}")
        return v

    @field_validator('datetime')
    @classmethod
    def validate_datetime(cls, v):
        if "/" in v:
            parts = v.split("/")
            if len(parts) != 2 or not all(parts):
                raise ValueError(
                    f"Invalid datetime interval '{v}': expected 'start/end', use '..' for an open end"
                )
        return v

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        return _drop_empty(handler(self))

    def to_json(self) -> Dict[str, Any]:
        """Encode as the JSON object pgstac's search() expects."""
        return self.model_dump(mode="json", by_alias=True)

    def with_token(self, token: Optional[str]) -> "Search":
        """Return a copy of this search that resumes at token."""
        return self.model_copy(update={"token": token}, deep=True)
