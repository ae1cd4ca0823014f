"""
Pure Enumeration Types for search requests.

Exports:
    SortDirection: Sort order for a SortBy entry
"""

from enum import Enum


class SortDirection(str, Enum):
    """
    Sort direction understood by pgstac's sortby extension.

    Encoded as the bare lowercase string.
    """

    ASC = "asc"
    DESC = "desc"
