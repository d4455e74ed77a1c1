"""
Core type definitions for replaygraph.

Raw telemetry payloads are modelled as a tagged union keyed by event type,
so that attribute extraction and causal linking never rely on ad hoc
field presence checks.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, Dict, Literal, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import MalformedURL


class EventType(StrEnum):
    """Event types with dedicated handling. Any other string is generic."""
    NETWORK_REQUEST = "network-request"
    CLICK = "click"
    KEYDOWN = "keydown"
    ERROR = "error"


class NodeKind(StrEnum):
    """Categories of nodes in the event graph."""
    DOMAIN = "domain"
    ENDPOINT = "endpoint"
    EVENT = "event"


class EdgeKind(StrEnum):
    """Types of relationships between nodes."""
    DOMAIN_ENDPOINT = "domain-endpoint"
    CAUSAL = "causal"
    TEMPORAL = "temporal"


class LogEvent(BaseModel):
    """
    One raw telemetry record as delivered by the data source.
    """
    type: str
    timestamp: Any
    received_at: Any = Field(default=None, alias="receivedAt")
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# =============================================================================
# Payload union
# =============================================================================

class NetworkRequestData(BaseModel):
    kind: Literal["network-request"] = "network-request"
    url: str | None = None
    method: str | None = None
    status: int | None = None
    status_text: str | None = Field(default=None, alias="statusText")
    mime_type: str | None = Field(default=None, alias="mimeType")
    time: float | None = None
    headers: Any = None
    post_data: str | None = Field(default=None, alias="postData")
    response_headers: Any = Field(default=None, alias="responseHeaders")
    response_body: str | None = Field(default=None, alias="responseBody")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Only the URL decides whether a request is usable; other fields degrade to None
    @field_validator("url", mode="before")
    @classmethod
    def _url_as_text(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("status", mode="before")
    @classmethod
    def _lenient_status(cls, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("time", mode="before")
    @classmethod
    def _lenient_time(cls, value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("method", "status_text", "mime_type", "post_data", "response_body", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def _split(self):
        if not self.url:
            raise MalformedURL(self.url)
        try:
            parts = urlsplit(self.url)
            # Accessing .port validates the netloc
            parts.port
        except ValueError as e:
            raise MalformedURL(self.url) from e
        if not parts.scheme or not parts.hostname:
            raise MalformedURL(self.url)
        return parts

    def hostname(self) -> str:
        """Host portion of the URL. Raises MalformedURL if it cannot be parsed."""
        return self._split().hostname

    def path(self) -> str:
        return self._split().path or "/"

    def status_class(self) -> str:
        if self.status is None:
            return "unknown"
        if 200 <= self.status < 300:
            return "success"
        if 300 <= self.status < 400:
            return "redirect"
        if 400 <= self.status < 500:
            return "client_error"
        if self.status >= 500:
            return "server_error"
        return "unknown"


class ClickData(BaseModel):
    kind: Literal["click"] = "click"
    tag: str | None = None
    element_id: str | None = Field(default=None, alias="id")
    class_name: str | None = Field(default=None, alias="class")
    text: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class KeydownData(BaseModel):
    kind: Literal["keydown"] = "keydown"
    key: str | None = None
    target: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ErrorData(BaseModel):
    kind: Literal["error"] = "error"
    message: str | None = None
    source: str | None = None
    stack: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GenericData(BaseModel):
    kind: Literal["generic"] = "generic"
    raw: Dict[str, Any] = Field(default_factory=dict)


EventPayload = Union[NetworkRequestData, ClickData, KeydownData, ErrorData, GenericData]


def parse_payload(event_type: str, data: Dict[str, Any]) -> EventPayload:
    """
    Select and validate the payload model for an event type.

    Unknown types, and known types whose data fails validation, fall back
    to GenericData so that a bad payload never removes the event itself.
    A network request always keeps its URL.
    """
    data = data or {}
    models = {
        EventType.NETWORK_REQUEST: NetworkRequestData,
        EventType.CLICK: ClickData,
        EventType.KEYDOWN: KeydownData,
        EventType.ERROR: ErrorData,
    }
    model = models.get(event_type)
    if model is None:
        return GenericData(raw=dict(data))
    try:
        return model.model_validate(data)
    except ValueError:
        if model is NetworkRequestData:
            return NetworkRequestData(url=data.get("url"))
        return GenericData(raw=dict(data))


class NormalizedEvent(BaseModel):
    """
    A LogEvent with parsed instants, its typed payload, and its original index.
    """
    index: int
    event_type: str
    timestamp: datetime
    received_at: datetime | None = None
    payload: EventPayload = Field(discriminator="kind")
    source: LogEvent

    model_config = ConfigDict(frozen=True)

    @property
    def node_id(self) -> str:
        """Deterministic id of the node derived from this event."""
        return f"{self.event_type}-{self.index}"

    def is_type(self, *types: str) -> bool:
        return self.event_type in types


# =============================================================================
# Graph
# =============================================================================

class GraphNode(BaseModel):
    """
    A node of the event graph.

    ``layout`` is an opaque payload for a layout engine (x/y and friends).
    Nothing in the engine reads it.
    """
    id: str
    kind: NodeKind
    event_type: str | None = None
    timestamp: datetime | None = None
    label: str = ""
    attributes: Dict[str, Any] = Field(default_factory=dict)
    source_event: LogEvent | None = None
    layout: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=False, extra="ignore")

    @property
    def is_domain(self) -> bool:
        return self.kind == NodeKind.DOMAIN

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, GraphNode):
            return self.id == other.id
        return False


class GraphEdge(BaseModel):
    """
    Directed relationship between two GraphNodes.
    """
    source: str
    target: str
    kind: EdgeKind
    weight: float = 1.0
    timestamp: datetime
    label: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple:
        return (self.source, self.target, self.kind.value)

    def is_causal(self) -> bool:
        return self.kind == EdgeKind.CAUSAL
