# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Public parser exports for converting tool output into diagnostics."""

from __future__ import annotations

from .ansible_lint import ANSIBLE_LINT_PARSER, ANSIBLE_LINT_PATTERN, parse_ansible_lint
from .base import ParseContext, TextParser

__all__ = [
    "ANSIBLE_LINT_PARSER",
    "ANSIBLE_LINT_PATTERN",
    "ParseContext",
    "TextParser",
    "parse_ansible_lint",
]
