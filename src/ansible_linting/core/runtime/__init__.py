# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process execution helpers."""

from __future__ import annotations

from .process import CommandOptions, CommandRunner, SubprocessRunner, interpret_completed, run_command_async

__all__ = [
    "CommandOptions",
    "CommandRunner",
    "SubprocessRunner",
    "interpret_completed",
    "run_command_async",
]
