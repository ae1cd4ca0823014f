"""
Request and response models for pgstac search.

Exports:
    Search, Fields, SortBy: Request encoders
    Page, Context, PageToken: Response decoders
    SortDirection: Sort order enum
"""

from .enums import SortDirection
from .search import Fields, Search, SortBy
from .page import Context, Page, PageToken

__all__ = [
    'SortDirection',
    'Fields',
    'Search',
    'SortBy',
    'Context',
    'Page',
    'PageToken',
]
