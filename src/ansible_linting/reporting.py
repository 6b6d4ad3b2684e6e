# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for rendering diagnostic records outside an editor."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Final, Literal

from rich.console import Console
from rich.text import Text

from .core.models import DiagnosticRecord
from .core.severity import Severity, severity_color

OutputFormat = Literal["text", "json"]
LOCATION_SEPARATOR: Final[str] = ":"


def format_location(record: DiagnosticRecord) -> str:
    """Return ``file:line:column`` using one-based numbers for humans."""

    start = record.location.position.start
    return LOCATION_SEPARATOR.join((record.file, str(start.line + 1), str(start.column + 1)))


def render_text_line(record: DiagnosticRecord) -> Text:
    """Return a styled ``location severity excerpt`` line for ``record``."""

    line = Text(format_location(record))
    line.append(" ")
    line.append(record.severity.value, style=severity_color(record.severity))
    line.append(f" {record.excerpt}")
    return line


def render_json(records: Sequence[DiagnosticRecord]) -> str:
    """Return ``records`` as a JSON array in the editor message shape."""

    return json.dumps([record.to_payload() for record in records], indent=2)


def emit_records(records: Sequence[DiagnosticRecord], *, console: Console, output: OutputFormat = "text") -> None:
    """Print ``records`` to ``console`` in the requested format.

    Args:
        records: Records to display, in order.
        console: Rich console receiving the output.
        output: ``"text"`` for one styled line per record, ``"json"`` for a JSON array.
    """

    if output == "json":
        console.print(render_json(records), markup=False, highlight=False, emoji=False)
        return
    for record in records:
        console.print(render_text_line(record))


def count_by_severity(records: Sequence[DiagnosticRecord]) -> dict[Severity, int]:
    """Return how many records fall into each severity bucket."""

    counts = dict.fromkeys(Severity, 0)
    for record in records:
        counts[record.severity] += 1
    return counts


__all__ = [
    "OutputFormat",
    "count_by_severity",
    "emit_records",
    "format_location",
    "render_json",
    "render_text_line",
]
