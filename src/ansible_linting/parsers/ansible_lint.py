# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for ansible-lint pep8-style (``-p``) output."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from ..core.models import DiagnosticRecord
from ..core.severity import Severity
from .base import ParseContext, TextParser, iter_pattern_matches

# ``path:line: [E123] message`` or ``path:line:column: [E123] message``; the file is the
# shortest prefix followed by a line number, so a column is never read as the line.
ANSIBLE_LINT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?P<file>.*?):(?P<line>\d+)(?::\d+)?:.*E\d{3,4}\]\s(?P<message>.*)"
)


def _absolute(path: str, cwd: Path) -> str:
    candidate = path if os.path.isabs(path) else os.path.join(cwd, path)
    return os.path.normpath(candidate)


def refers_to_requested(captured: str, context: ParseContext) -> bool:
    """Return ``True`` when ``captured`` names the file the request was for.

    Args:
        captured: File path as printed by the tool.
        context: Request context holding the requested file and working directory.

    Returns:
        bool: ``True`` when the requested path occurs in ``captured`` or both resolve alike.
    """

    requested = context.requested_file
    if requested in captured:
        return True
    return _absolute(captured, context.cwd) == os.path.normpath(requested)


def parse_ansible_lint(lines: Sequence[str], context: ParseContext) -> list[DiagnosticRecord]:
    """Convert ansible-lint output lines into warning records.

    Findings reported against an included task file or role keep that file's
    path, so the editor can show them where the problem really lives.
    Banners, blank lines and anything else that does not match are dropped.

    Args:
        lines: Raw stdout lines.
        context: Request context used to attribute each finding.

    Returns:
        list[DiagnosticRecord]: One ``warning`` per matching line, in output order.
    """

    records: list[DiagnosticRecord] = []
    for match in iter_pattern_matches(lines, ANSIBLE_LINT_PATTERN):
        captured = match.group("file")
        line = max(int(match.group("line")) - 1, 0)
        file = context.requested_file if refers_to_requested(captured, context) else _absolute(captured, context.cwd)
        records.append(DiagnosticRecord.on_line(Severity.WARNING, match.group("message"), file, line))
    return records


ANSIBLE_LINT_PARSER: Final[TextParser] = TextParser(parse_ansible_lint)


__all__ = [
    "ANSIBLE_LINT_PARSER",
    "ANSIBLE_LINT_PATTERN",
    "parse_ansible_lint",
    "refers_to_requested",
]
