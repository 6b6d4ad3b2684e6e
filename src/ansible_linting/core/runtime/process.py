# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import asyncio
import logging
import shutil
import subprocess  # nosec B404 - argument lists only, never shell=True
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final, Protocol, runtime_checkable

from ..models import RawToolOutput, ToolFailure, ToolOutput

LOGGER = logging.getLogger(__name__)

TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    timeout: float | None = None
    discard_stdin: bool = True

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


def combine_streams(stdout: str | None, stderr: str | None) -> str:
    """Join stderr and stdout into one failure text, stderr first.

    Args:
        stdout: Captured standard output, if any.
        stderr: Captured standard error, if any.

    Returns:
        str: Non-blank streams joined by a newline.
    """

    parts = [part.strip() for part in (stderr, stdout) if part and part.strip()]
    return "\n".join(parts)


def _ensure_text(value: str | bytes | None) -> str | None:
    """Return ``value`` decoded to text when supplied as ``bytes``.

    Args:
        value: Stream output captured from subprocess execution.

    Returns:
        str | None: Text output or ``None`` when no data was captured.
    """

    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _timeout_message(timeout: float | None) -> str:
    return f"Command timed out after {timeout:.1f}s" if timeout is not None else "Command timed out"


async def run_command_async(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` without blocking the running event loop.

    Output is always captured as text and stdin is discarded by default. On
    timeout, or when the awaiting task is cancelled, the child process is killed
    and reaped. A timeout is reported as a completed process with status
    :data:`TIMEOUT_RETURNCODE` and a timeout note on stderr.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    normalized = _normalize_args(args)
    resolved_options = options or CommandOptions()
    LOGGER.debug("spawning %s (cwd=%s)", normalized, resolved_options.cwd)

    process = await asyncio.create_subprocess_exec(
        *normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=dict(resolved_options.env) if resolved_options.env is not None else None,
        stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        raw_stdout, raw_stderr = await asyncio.wait_for(process.communicate(), timeout=resolved_options.timeout)
    except TimeoutError:
        await _reap(process)
        completed: CompletedProcess[str] = CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_RETURNCODE,
            stdout="",
            stderr=_timeout_message(resolved_options.timeout),
        )
    except asyncio.CancelledError:
        await _reap(process)
        raise
    else:
        completed = CompletedProcess(
            args=list(normalized),
            returncode=process.returncode if process.returncode is not None else 0,
            stdout=_ensure_text(raw_stdout) or "",
            stderr=_ensure_text(raw_stderr) or "",
        )

    return completed


async def _reap(process: asyncio.subprocess.Process) -> None:
    """Kill ``process`` if it is still running and wait for it to exit."""

    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


def interpret_completed(completed: CompletedProcess[str]) -> RawToolOutput:
    """Decide whether a finished run produced parseable output or a failure.

    A run fails when it timed out, or when it wrote to stderr while leaving
    stdout blank. The exit status alone never decides: tools exit non-zero
    whenever they report findings.

    Args:
        completed: Finished process metadata.

    Returns:
        RawToolOutput: :class:`ToolOutput` for parseable runs, otherwise :class:`ToolFailure`.
    """

    stdout = completed.stdout or ""
    stderr = completed.stderr or ""
    if completed.returncode == TIMEOUT_RETURNCODE or (not stdout.strip() and stderr.strip()):
        return ToolFailure(message=combine_streams(stdout, stderr), returncode=completed.returncode)
    return ToolOutput(stdout=stdout, stderr=stderr, returncode=completed.returncode)


@runtime_checkable
class CommandRunner(Protocol):
    """Run an external command and report its output or failure."""

    async def run(self, args: Sequence[str], *, cwd: Path | None, timeout: float | None) -> RawToolOutput:
        """Execute ``args`` and return the classified result."""
        ...


class SubprocessRunner:
    """Default :class:`CommandRunner` backed by real child processes."""

    def __init__(self, *, env: Mapping[str, str] | None = None) -> None:
        self._env = env

    def _options(self, cwd: Path | None, timeout: float | None) -> CommandOptions:
        return CommandOptions(cwd=cwd, env=self._env, timeout=timeout)

    async def run(self, args: Sequence[str], *, cwd: Path | None, timeout: float | None) -> RawToolOutput:
        try:
            completed = await run_command_async(args, options=self._options(cwd, timeout))
        except OSError as exc:
            return ToolFailure(message=str(exc))
        return interpret_completed(completed)


__all__ = [
    "CommandOptions",
    "CommandRunner",
    "SubprocessRunner",
    "TIMEOUT_RETURNCODE",
    "combine_streams",
    "interpret_completed",
    "run_command_async",
]
