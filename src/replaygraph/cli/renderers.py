"""
JSON output envelope for --json mode.

Every command renders either
    {"meta": {...}, "data": {...}}
or
    {"meta": {...}, "error": {"type": ..., "message": ...}}
on stdout. While capturing, anything else written to stdout is diverted so
the envelope stays the only JSON document printed.
"""

import io
import json
from contextlib import contextmanager, redirect_stdout
from typing import Any, Iterator

import click
from pydantic import BaseModel

from .. import __version__


class JsonRenderer:
    """Renders the standard success/error envelope for one command."""

    def __init__(self, command: str):
        self.command = command
        self.captured = ""

    @contextmanager
    def capture(self) -> Iterator[None]:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            yield
        self.captured = buffer.getvalue()

    def _meta(self, status: str) -> dict:
        return {"command": self.command, "status": status, "version": __version__}

    def render_success(self, data: Any) -> None:
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        click.echo(json.dumps({"meta": self._meta("success"), "data": data}, default=str))

    def render_error(self, error: Exception) -> None:
        click.echo(json.dumps({
            "meta": self._meta("error"),
            "error": {"type": type(error).__name__, "message": str(error)},
        }))
