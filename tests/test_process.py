# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for subprocess helpers."""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from ansible_linting.core.models import ToolFailure, ToolOutput
from ansible_linting.core.runtime.process import (
    TIMEOUT_RETURNCODE,
    CommandOptions,
    SubprocessRunner,
    combine_streams,
    interpret_completed,
    run_command_async,
)


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def _run(args: list[str], **options: object) -> CompletedProcess[str]:
    return asyncio.run(run_command_async(args, options=CommandOptions(**options)))


def test_run_captures_streams_and_status(tmp_path: Path) -> None:
    completed = _run(
        _python("import os, sys; print(os.getcwd()); sys.stderr.write('note'); sys.exit(2)"),
        cwd=tmp_path,
    )

    assert completed.returncode == 2
    assert Path(completed.stdout.strip()).resolve() == tmp_path.resolve()
    assert completed.stderr == "note"


def test_stdin_is_discarded() -> None:
    completed = _run(_python("import sys; print(repr(sys.stdin.read()))"))

    assert completed.stdout.strip() == "''"


def test_timeout_kills_the_child() -> None:
    started = time.monotonic()

    completed = _run(_python("import time; time.sleep(5)"), timeout=0.2)

    assert completed.returncode == TIMEOUT_RETURNCODE
    assert completed.stderr == "Command timed out after 0.2s"
    assert time.monotonic() - started < 4


def test_missing_executable_raises() -> None:
    with pytest.raises(FileNotFoundError, match="was not found on PATH"):
        _run(["definitely-not-ansible-lint-xyz"])


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandOptions(timeout=-1)


@pytest.mark.parametrize(
    ("stdout", "stderr", "returncode", "expected"),
    [
        ("site.yml:1: [E201] x\n", "", 2, ToolOutput),
        ("site.yml:1: [E201] x\n", "deprecation warning\n", 2, ToolOutput),
        ("", "", 0, ToolOutput),
        ("", "ERROR! boom\n", 0, ToolFailure),
        ("   \n", "ERROR! boom\n", 1, ToolFailure),
        ("partial", "", TIMEOUT_RETURNCODE, ToolFailure),
    ],
)
def test_interpret_completed(stdout: str, stderr: str, returncode: int, expected: type) -> None:
    completed = CompletedProcess(args=["ansible-lint"], returncode=returncode, stdout=stdout, stderr=stderr)

    assert isinstance(interpret_completed(completed), expected)


def test_failure_message_puts_stderr_first() -> None:
    completed = CompletedProcess(args=["x"], returncode=TIMEOUT_RETURNCODE, stdout="out\n", stderr="err\n")

    result = interpret_completed(completed)

    assert isinstance(result, ToolFailure)
    assert result.message == "err\nout"
    assert result.returncode == TIMEOUT_RETURNCODE


def test_combine_streams_skips_blank_parts() -> None:
    assert combine_streams(None, "  ") == ""
    assert combine_streams("out", None) == "out"


def test_runner_reports_missing_executable_as_failure() -> None:
    result = asyncio.run(SubprocessRunner().run(["definitely-not-ansible-lint-xyz"], cwd=None, timeout=1))

    assert isinstance(result, ToolFailure)
    assert "definitely-not-ansible-lint-xyz" in result.message


def test_runner_reports_timeout_as_failure() -> None:
    result = asyncio.run(SubprocessRunner().run(_python("import time; time.sleep(5)"), cwd=None, timeout=0.2))

    assert isinstance(result, ToolFailure)
    assert result.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in result.message


def test_runner_passes_environment(tmp_path: Path) -> None:
    runner = SubprocessRunner(env={"ANSIBLE_LINTING_PROBE": "on"})

    result = asyncio.run(
        runner.run(_python("import os; print(os.environ.get('ANSIBLE_LINTING_PROBE'))"), cwd=tmp_path, timeout=5),
    )

    assert isinstance(result, ToolOutput)
    assert result.stdout.strip() == "on"
