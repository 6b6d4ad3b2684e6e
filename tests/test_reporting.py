# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for record rendering."""

from __future__ import annotations

import json
from io import StringIO

from rich.console import Console

from ansible_linting.core.models import DiagnosticRecord
from ansible_linting.core.severity import Severity
from ansible_linting.reporting import (
    count_by_severity,
    emit_records,
    format_location,
    render_json,
    render_text_line,
)

RECORDS = [
    DiagnosticRecord.on_line(Severity.WARNING, "Trailing whitespace", "/srv/site.yml", 2),
    DiagnosticRecord.at_file_start(Severity.ERROR, "Missing file :smile:.yml.", "/srv/site.yml"),
]


def _console() -> Console:
    return Console(file=StringIO(), color_system=None, soft_wrap=True)


def test_location_is_one_based() -> None:
    assert format_location(RECORDS[0]) == "/srv/site.yml:3:1"


def test_text_line_carries_severity() -> None:
    assert render_text_line(RECORDS[1]).plain == "/srv/site.yml:1:1 error Missing file :smile:.yml."


def test_json_output_is_verbatim() -> None:
    console = _console()

    emit_records(RECORDS, console=console, output="json")

    payload = json.loads(console.file.getvalue())
    assert payload[1]["excerpt"] == "Missing file :smile:.yml."
    assert payload == json.loads(render_json(RECORDS))


def test_text_output_has_one_line_per_record() -> None:
    console = _console()

    emit_records(RECORDS, console=console)

    assert console.file.getvalue().splitlines() == [
        "/srv/site.yml:3:1 warning Trailing whitespace",
        "/srv/site.yml:1:1 error Missing file :smile:.yml.",
    ]


def test_count_by_severity_includes_empty_buckets() -> None:
    assert count_by_severity(RECORDS) == {Severity.ERROR: 1, Severity.WARNING: 1, Severity.INFO: 0}
