"""
Log Search.

Free-text and event-type filtering over the raw log, matching the
dashboard's search box: a query hits the URL, the event type or the HTTP
method, case-insensitively.
"""

from typing import Any, Iterable, List, Mapping

from ..core.types import LogEvent


def _as_event(raw: LogEvent | Mapping[str, Any]) -> LogEvent:
    return raw if isinstance(raw, LogEvent) else LogEvent.model_validate(raw)


def matches_query(event: LogEvent, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    url = event.data.get("url")
    method = event.data.get("method")
    return (
        (isinstance(url, str) and needle in url.lower())
        or needle in event.type.lower()
        or (isinstance(method, str) and needle in method.lower())
    )


def search_events(
    events: Iterable[LogEvent | Mapping[str, Any]],
    query: str = "",
    types: Iterable[str] | None = None,
) -> List[LogEvent]:
    """
    Filter events by query and type, preserving input order.

    An empty query matches everything; an empty type set applies no type
    restriction.
    """
    type_filter = set(types or [])
    results = []
    for raw in events:
        event = _as_event(raw)
        if type_filter and event.type not in type_filter:
            continue
        if matches_query(event, query):
            results.append(event)
    return results
