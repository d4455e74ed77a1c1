"""
Search Command - Filter the raw log by text and event type.
"""

from typing import List

import click
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.table import Table

from ...analysis.search import search_events
from ...core.types import LogEvent
from ..renderers import JsonRenderer
from ..utils import echo_error, echo_warning, load_events, read_events

console = Console()


class SearchResponse(BaseModel):
    query: str
    types: List[str] = Field(default_factory=list)
    total: int
    matches: List[LogEvent] = Field(default_factory=list)


def run_search(events: list, query: str, types: tuple) -> SearchResponse:
    matches = search_events(events, query, types)
    return SearchResponse(query=query, types=list(types), total=len(events), matches=matches)


@click.command()
@click.argument("query", default="")
@click.option("-l", "--log", "log_file", default=".", help="Path to the log file")
@click.option("-t", "--type", "types", multiple=True, help="Only include these event types")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(query: str, log_file: str, types: tuple, as_json: bool):
    """
    Search the log by URL, event type or HTTP method.
    """
    if as_json:
        renderer = JsonRenderer("search")
        error_to_report = None
        response_data = None
        with renderer.capture():
            try:
                response_data = run_search(read_events(log_file), query, types)
            except Exception as e:
                error_to_report = e

        if error_to_report:
            renderer.render_error(error_to_report)
        else:
            renderer.render_success(response_data)
        return

    events = load_events(log_file)
    if events is None:
        return

    try:
        result = run_search(events, query, types)
    except ValidationError as e:
        echo_error(f"Invalid event in log: {e.error_count()} validation error(s)")
        return

    if not result.matches:
        echo_warning(f"No events match '{query}'")
        return

    table = Table(title=f"{len(result.matches)} of {result.total} events")
    table.add_column("Timestamp")
    table.add_column("Type")
    table.add_column("Details")
    for event in result.matches:
        details = event.data.get("url") or event.data.get("message") or event.data.get("key") or ""
        method = event.data.get("method")
        if method:
            details = f"{method} {details}"
        table.add_row(str(event.timestamp), event.type, str(details))
    console.print(table)
