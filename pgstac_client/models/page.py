"""
Search Response Models.

Decodes the JSON object returned by pgstac's search() function.

Exports:
    PageToken: Opaque, direction-tagged pagination token
    Context: Page size and returned count echoed by the server
    Page: One page of search results
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PageToken(str):
    """
    Opaque pagination token.

    Only Page creates these, by prefixing the server cursor with "next:" or
    "prev:" so pgstac knows which way to walk when the token comes back in
    Search.token. Treat the value as a black box.
    """

    __slots__ = ()

    NEXT = "next"
    PREV = "prev"

    def __repr__(self) -> str:
        return f"PageToken({str.__repr__(self)})"


class Context(BaseModel):
    """Search context reported alongside each page."""

    model_config = ConfigDict(frozen=True, extra="allow")

    limit: Optional[int] = Field(default=None, description="Effective page size")
    returned: int = Field(..., ge=0, description="Number of features in this page")
    matched: Optional[int] = Field(
        default=None,
        description="Total matches, only when pgstac's context setting is on"
    )


class Page(BaseModel):
    """
    A page of search results.

    Features are kept as plain dicts: with a fields projection in play they
    are not guaranteed to be valid STAC items.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = Field(default="FeatureCollection", description="Always FeatureCollection")
    features: List[Dict[str, Any]] = Field(..., description="Returned features")
    next: Optional[str] = Field(default=None, description="Server cursor for the next page")
    prev: Optional[str] = Field(default=None, description="Server cursor for the previous page")
    context: Context = Field(..., description="Limit and returned count")

    def next_token(self) -> Optional[PageToken]:
        """Token for the following page, or None on the last page."""
        if self.next is None:
            return None
        return PageToken(f"{PageToken.NEXT}:{self.next}")

    def prev_token(self) -> Optional[PageToken]:
        """Token for the preceding page, or None on the first page."""
        if self.prev is None:
            return None
        return PageToken(f"{PageToken.PREV}:{self.prev}")
