"""
Related Command - List the nodes directly connected to one node.

Mirrors hovering a node in the replay view: the node itself plus every
neighbor across any edge, regardless of the playback position.
"""

from typing import Dict, List

import click
from pydantic import BaseModel, Field

from ...analysis.related import RelationQuery
from ...config import load_config
from ...core.builder import GraphBuilder
from ...core.exceptions import NodeNotFoundError
from ..renderers import JsonRenderer
from ..utils import echo_error, echo_info, load_events, read_events, resolve_node_id


class RelatedResponse(BaseModel):
    node_id: str
    kind: str
    label: str = ""
    related: List[str] = Field(default_factory=list)
    by_kind: Dict[str, List[str]] = Field(default_factory=dict)


def find_related(events: list, node_id: str) -> RelatedResponse:
    """
    Raises:
        NodeNotFoundError: If node_id does not resolve to a graph node.
    """
    graph = GraphBuilder(load_config()).build(events).graph
    resolved = resolve_node_id(graph, node_id)
    if resolved is None:
        raise NodeNotFoundError(node_id)

    query = RelationQuery(graph)
    node = graph.get_node(resolved)
    return RelatedResponse(
        node_id=resolved,
        kind=node.kind.value,
        label=node.label,
        related=sorted(query.related_nodes(resolved)),
        by_kind=query.breakdown(resolved),
    )


@click.command()
@click.argument("node_id")
@click.option("-l", "--log", "log_file", default=".", help="Path to the log file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def related(node_id: str, log_file: str, as_json: bool):
    """
    Show the nodes sharing an edge with NODE_ID.

    \b
    Examples:
      replaygraph related click-6
      replaygraph related api.example.com --json
    """
    if as_json:
        renderer = JsonRenderer("related")
        error_to_report = None
        response_data = None
        with renderer.capture():
            try:
                response_data = find_related(read_events(log_file), node_id)
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
        result = find_related(events, node_id)
    except NodeNotFoundError as e:
        echo_error(str(e))
        return

    click.echo()
    click.echo(click.style(f"{result.node_id}", bold=True) + f"  ({result.kind}) {result.label}")
    click.echo("═" * 60)
    for kind, ids in result.by_kind.items():
        if not ids:
            continue
        click.echo(click.style(f"\n{kind.title()} ({len(ids)}):", bold=True))
        for related_id in ids:
            click.echo(f"  • {related_id}")

    if len(result.related) == 1:
        echo_info("No connected nodes")
    click.echo()
