"""
Replay Command - Show what is visible at a point of the timeline.

Usage:
    # Halfway through the session
    replaygraph replay telemetry.json --position 50

    # Only clicks and requests
    replaygraph replay telemetry.json -p 100 -t click -t network-request

    # Autoplay from the start at 4x and report the final frame
    replaygraph replay telemetry.json --play --speed 4
"""

from typing import Tuple

import click
from rich.console import Console
from rich.table import Table

from ...config import load_config
from ...core.session import ReplaySession, ReplaySnapshot
from ..renderers import JsonRenderer
from ..utils import configure_logging, echo_info, echo_warning, load_events, read_events

console = Console()


def run_replay(events: list, position: float, types: Tuple[str, ...],
               play: bool, speed: int) -> Tuple[ReplaySnapshot, int]:
    """Load a session, apply filters and position. Returns the frame and ticks applied."""
    session = ReplaySession(load_config())
    session.load(events)
    if types:
        session.set_filter(types)

    for _ in session.config.speeds:
        if session.playback.state.speed == speed:
            break
        session.cycle_speed()

    ticks = 0
    if play:
        session.reset()
        session.play()
        ticks = session.playback.run_until_paused()
    else:
        session.seek(position)
    return session.snapshot(), ticks


@click.command()
@click.argument("log_file", default=".")
@click.option("-p", "--position", default=100.0, type=click.FloatRange(0, 100),
              help="Playback position (0-100)")
@click.option("-t", "--type", "types", multiple=True, help="Only show these event types")
@click.option("--play", is_flag=True, help="Autoplay from the start until the end")
@click.option("--speed", default="1", type=click.Choice(["1", "2", "4"]), help="Playback speed")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def replay(log_file: str, position: float, types: tuple, play: bool,
           speed: str, as_json: bool, verbose: bool):
    """
    Project the event graph at a playback position.
    """
    configure_logging(verbose)

    if as_json:
        renderer = JsonRenderer("replay")
        error_to_report = None
        response_data = None
        with renderer.capture():
            try:
                response_data, _ = run_replay(read_events(log_file), position, types, play, int(speed))
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

    frame, ticks = run_replay(events, position, types, play, int(speed))
    if frame.counts.total == 0:
        echo_warning("No events")
        return

    table = Table(title=f"Visible at {frame.playback.position:.1f}%")
    table.add_column("Time")
    table.add_column("Id")
    table.add_column("Kind")
    table.add_column("Label")
    for node in frame.nodes:
        if not node.visible or node.kind == "domain":
            continue
        table.add_row(
            node.timestamp.strftime("%H:%M:%S.%f")[:-3] if node.timestamp else "",
            node.id,
            node.kind,
            node.label,
        )
    console.print(table)

    visible_edges = [e for e in frame.edges if e.visible and e.label]
    for edge in visible_edges:
        console.print(f"  {edge.source} ─[{edge.label}]→ {edge.target}")

    if play:
        echo_info(f"Played {ticks} ticks at {frame.playback.speed}x")
    cutoff = frame.cutoff.isoformat() if frame.cutoff else "-"
    click.echo(f"{frame.counts.visible}/{frame.counts.total} events visible (cutoff {cutoff})")
