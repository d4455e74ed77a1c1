"""
Error kinds raised and absorbed by the replay engine.

None of these are fatal to a batch. Per-event failures are converted into
EventError records by the normalizer and the graph builder; the remaining
exceptions surface only through explicit query APIs and the CLI.
"""

from dataclasses import dataclass


class ReplayGraphError(Exception):
    """Base class for replaygraph errors."""


class MalformedTimestamp(ReplayGraphError):
    """Raised when an event timestamp cannot be parsed into an instant."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unparsable timestamp: {value!r}")


class MalformedURL(ReplayGraphError):
    """Raised when a network-request URL has no parsable scheme and host."""

    def __init__(self, url: object):
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class EmptyGraph(ReplayGraphError):
    """Raised when a time range is required but no event produced a node."""

    def __init__(self, message: str = "No timestamped nodes in graph"):
        super().__init__(message)


class NodeNotFoundError(ReplayGraphError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class LogFileNotFoundError(ReplayGraphError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Log file not found: {path}")


@dataclass(frozen=True)
class EventError:
    """Represents a non-fatal error attached to a single input event."""

    index: int
    message: str
    error_type: str = "general"
    event_type: str | None = None
