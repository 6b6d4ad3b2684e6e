# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the ansible_linting package."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..config import LintConfiguration
from .severity import Severity

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue]

FILE_START_LINE: Final[int] = 0


class Point(BaseModel):
    """Zero-based line/column coordinate inside a document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    column: int = Field(ge=0)

    def as_list(self) -> list[int]:
        """Return the point as a ``[line, column]`` pair."""

        return [self.line, self.column]


class Range(BaseModel):
    """Half-open ``[start, end)`` span between two points."""

    model_config = ConfigDict(frozen=True)

    start: Point
    end: Point

    @model_validator(mode="after")
    def _check_order(self) -> Range:
        """Reject ranges whose end precedes their start.

        Returns:
            Range: The validated range.

        Raises:
            ValueError: If ``end`` sorts before ``start``.
        """

        if (self.end.line, self.end.column) < (self.start.line, self.start.column):
            raise ValueError("range end must not precede range start")
        return self

    @classmethod
    def first_character(cls, line: int) -> Range:
        """Return the range covering the first character of ``line``.

        Args:
            line: Zero-based line index.

        Returns:
            Range: ``[[line, 0], [line, 1]]``.
        """

        return cls(start=Point(line=line, column=0), end=Point(line=line, column=1))

    def as_list(self) -> list[list[int]]:
        """Return the range in the ``[[line, col], [line, col]]`` editor shape."""

        return [self.start.as_list(), self.end.as_list()]


class Location(BaseModel):
    """File and position a diagnostic is anchored to."""

    model_config = ConfigDict(frozen=True)

    file: str
    position: Range

    @field_validator("file", mode="before")
    @classmethod
    def _coerce_file(cls, value: str | Path) -> str:
        """Accept :class:`pathlib.Path` values for the file label.

        Args:
            value: Raw file label supplied by the caller.

        Returns:
            str: File label rendered as text.
        """

        return str(value) if isinstance(value, Path) else value


class DiagnosticRecord(BaseModel):
    """A single diagnostic handed to the editor for rendering."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    excerpt: str
    location: Location

    @classmethod
    def on_line(cls, severity: Severity, excerpt: str, file: str | Path, line: int) -> DiagnosticRecord:
        """Build a record anchored to the first character of ``line``.

        Args:
            severity: Severity bucket for the record.
            excerpt: Human-readable message.
            file: File label the record belongs to.
            line: Zero-based line index.

        Returns:
            DiagnosticRecord: Record positioned at ``[[line, 0], [line, 1]]``.
        """

        return cls(
            severity=severity,
            excerpt=excerpt,
            location=Location(file=file, position=Range.first_character(line)),
        )

    @classmethod
    def at_file_start(cls, severity: Severity, excerpt: str, file: str | Path) -> DiagnosticRecord:
        """Build a record anchored at the start of ``file``."""

        return cls.on_line(severity, excerpt, file, FILE_START_LINE)

    @property
    def file(self) -> str:
        """Expose the location's file label."""

        return self.location.file

    @property
    def line(self) -> int:
        """Expose the zero-based start line."""

        return self.location.position.start.line

    def to_payload(self) -> dict[str, JsonValue]:
        """Return the record in the editor's message shape.

        Returns:
            dict[str, JsonValue]: ``severity``, ``excerpt`` and ``location`` keys with the
            position rendered as nested lists.
        """

        return {
            "severity": self.severity.value,
            "excerpt": self.excerpt,
            "location": {
                "file": self.location.file,
                "position": self.location.position.as_list(),
            },
        }


class LintRequest(BaseModel):
    """One lint trigger: the target file and the configuration snapshot."""

    model_config = ConfigDict(frozen=True)

    file_path: str | None
    config: LintConfiguration = Field(default_factory=LintConfiguration)

    @field_validator("file_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: str | Path | None) -> str | None:
        """Store the target as text, keeping ``None`` for unsaved buffers."""

        if value is None:
            return None
        return str(value)


class ToolOutput(BaseModel):
    """Output captured from a tool run that produced parseable stdout."""

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


class ToolFailure(BaseModel):
    """A tool run that failed, timed out, or could not be spawned."""

    model_config = ConfigDict(frozen=True)

    message: str
    returncode: int | None = None


type RawToolOutput = ToolOutput | ToolFailure


__all__ = [
    "DiagnosticRecord",
    "FILE_START_LINE",
    "JsonScalar",
    "JsonValue",
    "LintRequest",
    "Location",
    "Point",
    "Range",
    "RawToolOutput",
    "ToolFailure",
    "ToolOutput",
]
