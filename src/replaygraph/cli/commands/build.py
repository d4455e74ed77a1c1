"""
Build Command - Construct the event graph from a log file.

Standardized output version.
"""

import logging
from typing import Dict, List

import click
from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from ...config import load_config
from ...core.builder import GraphBuilder
from ...core.timeline import TimelineIndex
from ..renderers import JsonRenderer
from ..utils import configure_logging, echo_success, echo_warning, load_events, read_events

logger = logging.getLogger(__name__)
console = Console()


# --- API Models ---
class BuildSummary(BaseModel):
    """
    Structured response for the build command.
    """
    total_events: int
    nodes_found: int
    edges_found: int
    nodes_by_kind: Dict[str, int] = Field(default_factory=dict)
    edges_by_kind: Dict[str, int] = Field(default_factory=dict)
    causal_labels: Dict[str, int] = Field(default_factory=dict)
    dropped_events: int = 0
    rejected_events: int = 0
    event_types: List[str] = Field(default_factory=list)
    markers: List[str] = Field(default_factory=list)


def summarize(events: list) -> BuildSummary:
    builder = GraphBuilder(load_config())
    result = builder.build(events)
    stats = result.graph.get_stats()
    timeline = TimelineIndex.from_graph(result.graph, builder.config.marker_count)

    labels: Dict[str, int] = {}
    for edge in result.edges:
        if edge.label:
            labels[edge.label] = labels.get(edge.label, 0) + 1

    return BuildSummary(
        total_events=len(events),
        nodes_found=stats["total_nodes"],
        edges_found=stats["total_edges"],
        nodes_by_kind=stats["nodes_by_kind"],
        edges_by_kind=stats["edges_by_kind"],
        causal_labels=labels,
        dropped_events=result.dropped_count,
        rejected_events=result.rejected_count,
        event_types=result.event_types,
        markers=[m.isoformat() for m in timeline.markers],
    )


@click.command()
@click.argument("log_file", default=".")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def build(log_file: str, as_json: bool, verbose: bool):
    """
    Build the event graph from a JSON log file and print its statistics.
    """
    configure_logging(verbose)

    if as_json:
        renderer = JsonRenderer("build")
        error_to_report = None
        response_data = None
        with renderer.capture():
            try:
                response_data = summarize(read_events(log_file))
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

    summary = summarize(events)
    if summary.nodes_found == 0:
        echo_warning("No events produced graph nodes")
        return

    table = Table(title="Event Graph")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for kind, count in summary.nodes_by_kind.items():
        table.add_row(f"{kind} nodes", str(count))
    for kind, count in summary.edges_by_kind.items():
        table.add_row(f"{kind} edges", str(count))
    for label, count in summary.causal_labels.items():
        table.add_row(f"  {label}", str(count))
    table.add_row("dropped", str(summary.dropped_events))
    table.add_row("rejected (bad timestamp)", str(summary.rejected_events))
    console.print(table)

    if summary.markers:
        console.print(f"[dim]Timeline: {summary.markers[0]} → {summary.markers[-1]}[/dim]")
    echo_success(f"Built {summary.nodes_found} nodes and {summary.edges_found} edges from {summary.total_events} events")
