# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core types shared across the ansible_linting package."""

from __future__ import annotations

from .models import DiagnosticRecord, LintRequest, Location, Point, Range, ToolFailure, ToolOutput
from .severity import Severity

__all__ = [
    "DiagnosticRecord",
    "LintRequest",
    "Location",
    "Point",
    "Range",
    "Severity",
    "ToolFailure",
    "ToolOutput",
]
