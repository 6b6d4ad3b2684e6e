# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Editor diagnostics for ansible-lint.

Build an ansible-lint command from a :class:`LintConfiguration`, run it, and
turn its output into :class:`DiagnosticRecord` values an editor can render.
"""

from __future__ import annotations

from .config import ConfigError, LintConfiguration
from .core.models import DiagnosticRecord, LintRequest
from .core.severity import Severity
from .linter import AnsibleLinter, CapabilityReport

__version__ = "2.0.0"

__all__ = [
    "AnsibleLinter",
    "CapabilityReport",
    "ConfigError",
    "DiagnosticRecord",
    "LintConfiguration",
    "LintRequest",
    "Severity",
    "__version__",
]
