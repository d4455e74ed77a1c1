"""
CLI Utilities - Shared helper functions for command line operations.

This module provides common functionality used across the CLI commands,
including formatted printing, log loading and node id resolution.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from ..core.exceptions import LogFileNotFoundError, ReplayGraphError
from ..core.graph import EventGraph

DEFAULT_LOG_FILES = (
    "telemetry.json",
    "logs.json",
    ".replaygraph/telemetry.json",
)


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool) -> None:
    """Enable debug logging for the engine when --verbose is given."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def resolve_log_path(log_file: str) -> Path:
    """
    Resolve a log file argument, looking for default file names in directories.

    Raises:
        LogFileNotFoundError: If no log file can be found.
    """
    log_path = Path(log_file)

    if log_path.is_dir():
        for candidate in DEFAULT_LOG_FILES:
            if (log_path / candidate).exists():
                return log_path / candidate
        raise LogFileNotFoundError(str(log_path / DEFAULT_LOG_FILES[0]))

    if not log_path.exists():
        raise LogFileNotFoundError(log_file)
    return log_path


def read_events(log_file: str) -> List[Dict[str, Any]]:
    """
    Read raw events from a JSON file.

    Accepts either a top-level list of events or an object with a "logs" list.

    Raises:
        LogFileNotFoundError: If the file does not exist.
        ReplayGraphError: If the content is not a list of events.
    """
    log_path = resolve_log_path(log_file)
    try:
        data = json.loads(log_path.read_text())
    except json.JSONDecodeError as e:
        raise ReplayGraphError(f"Invalid JSON in {log_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("logs")
    if not isinstance(data, list):
        raise ReplayGraphError(f"Expected a list of events in {log_path}")
    return data


def load_events(log_file: str) -> Optional[List[Dict[str, Any]]]:
    """
    Human-mode wrapper around read_events that prints errors instead of raising.
    """
    try:
        return read_events(log_file)
    except LogFileNotFoundError as e:
        echo_error(str(e))
        click.echo("Run 'replaygraph init --demo' to create a sample log.")
        return None
    except ReplayGraphError as e:
        echo_error(f"Failed to load log: {e}")
        return None


def resolve_node_id(graph: EventGraph, input_id: str) -> Optional[str]:
    """
    Resolve a node id, accepting an exact id or a unique substring of one.
    """
    if graph.has_node(input_id):
        return input_id

    matches = [node.id for node in graph.iter_nodes() if input_id.lower() in node.id.lower()]
    if len(matches) == 1:
        return matches[0]
    if matches:
        for m in matches:
            if m.endswith(f"-{input_id}"):
                return m
    return None
