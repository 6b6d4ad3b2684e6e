# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lint entry points binding command building, execution and interpretation."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict

from .classification import classify_failure
from .command import build_lint_command
from .config import LintConfiguration
from .core.models import DiagnosticRecord, LintRequest, RawToolOutput, ToolFailure
from .core.runtime.process import CommandRunner, SubprocessRunner
from .notifications import CollectingNotifier, Notification, NotificationLevel, Notifier
from .parsers import ANSIBLE_LINT_PARSER, ParseContext

LOGGER = logging.getLogger(__name__)

UNEXPECTED_FAILURE_HEADLINE: Final[str] = (
    "An unexpected error with ansible, ansible-lint, linter-ansible-linting, and/or your playbook has occurred."
)
CAPABILITY_FLAG: Final[str] = "-T"
CAPABILITY_MARKER: Final[str] = "repeatability"
UPGRADE_HEADLINE: Final[str] = (
    "Support for ansible-lint < 3.5 is deprecated. Backwards compatibility should exist, but is not guaranteed."
)
UPGRADE_DETAIL: Final[str] = "Please upgrade your version of ansible-lint to >= 3.5.\n"
UNSAVED_BUFFER_FAILURE: Final[str] = (
    "No file path to lint: os.path.dirname cannot resolve a working directory for an unsaved buffer."
)


class CapabilityReport(BaseModel):
    """Result of probing the installed ansible-lint."""

    model_config = ConfigDict(frozen=True)

    supported: bool
    output: str = ""
    warned: bool = False
    probed: bool = True


class AnsibleLinter:
    """Run ansible-lint for editor lint requests.

    Every call resolves to a list of :class:`DiagnosticRecord`; failures the
    classifier does not recognise go to the notifier instead of the list.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._runner: CommandRunner = runner or SubprocessRunner()
        self._notifier: Notifier = notifier or CollectingNotifier()
        self._upgrade_warned = False
        self._background: set[asyncio.Task[CapabilityReport]] = set()

    @property
    def notifier(self) -> Notifier:
        """Return the notifier receiving out-of-band messages."""

        return self._notifier

    async def lint(self, request: LintRequest) -> list[DiagnosticRecord]:
        """Lint the file named by ``request``.

        Args:
            request: Target file and configuration snapshot.

        Returns:
            list[DiagnosticRecord]: Findings, a single classified failure
            record, or an empty list for blacklisted files and unrecognised failures.
        """

        if request.file_path is None:
            return self.handle_failure(ToolFailure(message=UNSAVED_BUFFER_FAILURE), None)
        command = build_lint_command(request.config, request.file_path)
        if command is None:
            return []

        raw = await self._runner.run(command.args, cwd=command.cwd, timeout=request.config.timeout)
        return self.interpret(raw, request.file_path, command.cwd)

    async def lint_file(self, file_path: str | Path, config: LintConfiguration) -> list[DiagnosticRecord]:
        """Shorthand for :meth:`lint` with a freshly built request."""

        return await self.lint(LintRequest(file_path=file_path, config=config))

    def lint_sync(self, request: LintRequest) -> list[DiagnosticRecord]:
        """Blocking variant of :meth:`lint` for callers without an event loop."""

        return asyncio.run(self.lint(request))

    def interpret(self, raw: RawToolOutput, file_path: str | None, cwd: Path) -> list[DiagnosticRecord]:
        """Turn one tool result into records.

        Args:
            raw: Output or failure produced by the runner.
            file_path: File the request was for.
            cwd: Directory the tool ran in.

        Returns:
            list[DiagnosticRecord]: Records for the editor.
        """

        if isinstance(raw, ToolFailure):
            return self.handle_failure(raw, file_path)
        if file_path is None:
            return []
        return ANSIBLE_LINT_PARSER.parse(raw.stdout, context=ParseContext(requested_file=file_path, cwd=cwd))

    def handle_failure(self, failure: ToolFailure, file_path: str | None) -> list[DiagnosticRecord]:
        """Classify ``failure``; notify the host when no rule recognises it.

        Args:
            failure: Failed run carrying the combined message text.
            file_path: File the request was for.

        Returns:
            list[DiagnosticRecord]: The classified record, or an empty list.
        """

        classification = classify_failure(failure.message, file_path)
        LOGGER.debug("classified failure for %s as %s", file_path, classification.rule)
        if not classification.recognised:
            self._notifier.notify(
                Notification(
                    level=NotificationLevel.ERROR,
                    headline=UNEXPECTED_FAILURE_HEADLINE,
                    detail=failure.message,
                )
            )
            return []
        return list(classification.records)

    async def check_capabilities(self, config: LintConfiguration) -> CapabilityReport:
        """Probe ansible-lint and warn once when it predates the supported release.

        A probe that cannot run is reported with ``probed=False`` and no
        warning; the lint requests that follow will surface the real problem.

        Args:
            config: Configuration naming the executable and timeout.

        Returns:
            CapabilityReport: Whether the marker was present and whether a warning went out.
        """

        raw = await self._runner.run([config.executable, CAPABILITY_FLAG], cwd=None, timeout=config.timeout)
        if isinstance(raw, ToolFailure):
            LOGGER.debug("capability probe failed: %s", raw.message)
            return CapabilityReport(supported=False, output=raw.message, probed=False)

        output = "\n".join(part for part in (raw.stdout, raw.stderr) if part)
        supported = CAPABILITY_MARKER in output
        warned = False
        if not supported and not self._upgrade_warned:
            self._upgrade_warned = True
            warned = True
            self._notifier.notify(
                Notification(level=NotificationLevel.WARNING, headline=UPGRADE_HEADLINE, detail=UPGRADE_DETAIL)
            )
        return CapabilityReport(supported=supported, output=output, warned=warned)

    def activate(self, config: LintConfiguration) -> asyncio.Task[CapabilityReport]:
        """Schedule :meth:`check_capabilities` on the running loop without awaiting it.

        Args:
            config: Configuration snapshot taken at activation.

        Returns:
            asyncio.Task[CapabilityReport]: The background probe.

        Raises:
            RuntimeError: If no event loop is running.
        """

        task = asyncio.get_running_loop().create_task(self.check_capabilities(config))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task


__all__ = [
    "AnsibleLinter",
    "CAPABILITY_FLAG",
    "CAPABILITY_MARKER",
    "CapabilityReport",
    "UNEXPECTED_FAILURE_HEADLINE",
    "UNSAVED_BUFFER_FAILURE",
    "UPGRADE_DETAIL",
    "UPGRADE_HEADLINE",
]
