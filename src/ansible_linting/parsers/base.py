# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..core.models import DiagnosticRecord


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Describe the lint request a tool output belongs to.

    Attributes:
        requested_file: Absolute path of the file the tool was asked to lint.
        cwd: Directory the tool ran in; relative paths in its output resolve here.
    """

    requested_file: str
    cwd: Path


TextTransform = Callable[[Sequence[str], ParseContext], list[DiagnosticRecord]]


def _ensure_lines(value: str | Sequence[str]) -> list[str]:
    """Normalise string-based output into a list of lines."""
    if isinstance(value, str):
        return value.splitlines()
    return [str(item) for item in value]


def iter_pattern_matches(lines: Sequence[str], pattern: re.Pattern[str]) -> Iterator[re.Match[str]]:
    """Yield matches of ``pattern`` against each stripped, non-blank line.

    Args:
        lines: Sequence of raw lines emitted by a tool.
        pattern: Compiled regular expression used to match diagnostic lines.

    Yields:
        re.Match[str]: Match objects produced by ``pattern``.
    """

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        match = pattern.match(line)
        if match:
            yield match


@dataclass(slots=True)
class TextParser:
    """Parse stdout via a text transformation function."""

    transform: TextTransform

    def parse(self, stdout: str | Sequence[str], *, context: ParseContext) -> list[DiagnosticRecord]:
        """Split ``stdout`` into lines and hand them to :attr:`transform`."""

        return self.transform(_ensure_lines(stdout), context)


__all__ = [
    "ParseContext",
    "TextParser",
    "TextTransform",
    "iter_pattern_matches",
]
