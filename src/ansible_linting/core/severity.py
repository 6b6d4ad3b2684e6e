# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels understood by the editor diagnostics surface."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_SEVERITY_STYLES: Final[dict[Severity, str]] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def severity_color(severity: Severity) -> str:
    """Return the rich colour name associated with ``severity``."""

    return _SEVERITY_STYLES.get(severity, "yellow")


__all__ = ["Severity", "severity_color"]
