"""
Query modules over a built event graph and its raw log.
"""

from .related import RelationQuery
from .search import search_events

__all__ = ["RelationQuery", "search_events"]
