# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from ansible_linting.core.models import RawToolOutput
from ansible_linting.notifications import CollectingNotifier


@dataclass(slots=True)
class RunnerCall:
    """Arguments received by :class:`FakeRunner`."""

    args: tuple[str, ...]
    cwd: Path | None
    timeout: float | None


class FakeRunner:
    """In-memory :class:`CommandRunner` returning a canned result."""

    def __init__(self, result: RawToolOutput) -> None:
        self.result = result
        self.calls: list[RunnerCall] = []

    async def run(self, args: Sequence[str], *, cwd: Path | None, timeout: float | None) -> RawToolOutput:
        self.calls.append(RunnerCall(args=tuple(args), cwd=cwd, timeout=timeout))
        return self.result


@pytest.fixture
def notifier() -> CollectingNotifier:
    """Return a notifier that records everything it receives."""
    return CollectingNotifier()


@pytest.fixture
def playbook(tmp_path: Path) -> Path:
    """Return an existing playbook inside a throwaway project."""
    project = tmp_path / "project"
    project.mkdir()
    path = project / "site.yml"
    path.write_text("- hosts: all\n  tasks: []\n", encoding="utf-8")
    return path


FakeToolFactory = Callable[..., Path]


@pytest.fixture
def fake_tool(tmp_path: Path) -> FakeToolFactory:
    """Return a factory writing an executable stand-in for ansible-lint.

    The stand-in prints the given streams, records its argv and cwd to
    ``<script>.calls`` and exits with ``exit_code``.
    """

    def _make(stdout: str = "", stderr: str = "", exit_code: int = 0, sleep: float = 0.0) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        wrapper = bin_dir / "ansible-lint"
        body = bin_dir / "fake_ansible_lint.py"
        calls = bin_dir / "ansible-lint.calls"
        body.write_text(
            "import json, os, sys, time\n"
            f"with open({str(calls)!r}, 'a', encoding='utf-8') as handle:\n"
            "    handle.write(json.dumps({'argv': sys.argv[1:], 'cwd': os.getcwd()}) + '\\n')\n"
            f"time.sleep({sleep!r})\n"
            f"sys.stdout.write({stdout!r})\n"
            f"sys.stderr.write({stderr!r})\n"
            f"sys.exit({exit_code!r})\n",
            encoding="utf-8",
        )
        wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{body}" "$@"\n', encoding="utf-8")
        wrapper.chmod(0o755)
        return wrapper

    return _make


@pytest.fixture
def make_runner() -> Callable[[RawToolOutput], FakeRunner]:
    """Return a factory for :class:`FakeRunner` instances."""
    return FakeRunner
