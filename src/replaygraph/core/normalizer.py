"""
Event Normalizer.

Validates and classifies raw log entries: parses the canonical timestamp,
selects the typed payload, and keeps the original input index so that
node ids stay stable when some events are rejected.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping

from pydantic import ValidationError

from .exceptions import EventError, MalformedTimestamp
from .result import Err, Ok, Result
from .types import LogEvent, NormalizedEvent, parse_payload


def parse_instant(value: Any) -> datetime:
    """
    Parse a timestamp into a timezone-aware datetime (UTC).

    Accepts ISO-8601 strings (including a trailing ``Z``), datetime objects
    (naive values are taken as UTC) and epoch milliseconds.

    Raises:
        MalformedTimestamp: If the value cannot be interpreted.
    """
    if isinstance(value, bool) or value is None:
        raise MalformedTimestamp(value)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise MalformedTimestamp(value) from e
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise MalformedTimestamp(value) from e
    else:
        raise MalformedTimestamp(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class NormalizationReport:
    """Surviving events in timeline order plus per-event rejections."""

    events: List[NormalizedEvent] = field(default_factory=list)
    errors: List[EventError] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.errors)

    @property
    def event_types(self) -> List[str]:
        return sorted({e.event_type for e in self.events})


class EventNormalizer:
    """
    Turns a raw event sequence into NormalizedEvents.

    Rejected events are logged and reported but never abort the batch.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.EventNormalizer")

    def normalize(self, events: Iterable[LogEvent | Mapping[str, Any]]) -> NormalizationReport:
        report = NormalizationReport()

        for index, raw in enumerate(events):
            result = self.normalize_event(index, raw)
            if result.is_ok():
                report.events.append(result.unwrap())
            else:
                error = result.error
                self._logger.warning(f"Rejected event {index}: {error.message}")
                report.errors.append(error)

        # Stable: ties keep input order
        report.events.sort(key=lambda e: e.timestamp)
        return report

    def normalize_event(
        self, index: int, raw: LogEvent | Mapping[str, Any]
    ) -> Result[NormalizedEvent, EventError]:
        """Normalize a single event. Returns Ok(NormalizedEvent) or Err(EventError)."""
        try:
            event = raw if isinstance(raw, LogEvent) else LogEvent.model_validate(raw)
        except (ValidationError, TypeError) as e:
            return Err(EventError(
                index=index,
                message=f"Invalid event: {e}",
                error_type="invalid_event",
            ))

        try:
            timestamp = parse_instant(event.timestamp)
        except MalformedTimestamp as e:
            return Err(EventError(
                index=index,
                message=str(e),
                error_type="malformed_timestamp",
                event_type=event.type,
            ))

        received_at = None
        if event.received_at is not None:
            try:
                received_at = parse_instant(event.received_at)
            except MalformedTimestamp as e:
                self._logger.debug(f"Event {index}: ignoring receivedAt ({e})")

        return Ok(NormalizedEvent(
            index=index,
            event_type=event.type,
            timestamp=timestamp,
            received_at=received_at,
            payload=parse_payload(event.type, event.data),
            source=event,
        ))
