# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application: lint playbooks and inspect configuration from a terminal."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final

import typer

from ..config import ConfigError, LintConfiguration
from ..config_loader import ConfigLoader
from ..core.models import DiagnosticRecord, LintRequest
from ..core.severity import Severity
from ..linter import AnsibleLinter
from ..logging import fail, info, ok
from ..notifications import ConsoleNotifier
from ..reporting import OutputFormat, count_by_severity, emit_records
from ..runtime.console.manager import get_console_manager

CONFIG_ERROR_EXIT: Final[int] = 2
OUTPUT_FORMATS: Final[tuple[OutputFormat, ...]] = ("text", "json")

app = typer.Typer(
    help="Run ansible-lint and report its findings as editor diagnostics.",
    no_args_is_help=True,
    add_completion=False,
)


def _load_config(root: Path, overrides: dict[str, Any], *, use_emoji: bool) -> LintConfiguration:
    try:
        return ConfigLoader.for_root(root).load(overrides)
    except ConfigError as exc:
        fail(f"Invalid configuration: {exc}", use_emoji=use_emoji)
        raise typer.Exit(code=CONFIG_ERROR_EXIT) from exc


def _validate_format(value: str) -> OutputFormat:
    lowered = value.lower()
    for candidate in OUTPUT_FORMATS:
        if candidate == lowered:
            return candidate
    raise typer.BadParameter(f"format must be one of: {', '.join(OUTPUT_FORMATS)}")


async def _lint_files(linter: AnsibleLinter, files: Sequence[Path], config: LintConfiguration) -> list[DiagnosticRecord]:
    requests = [LintRequest(file_path=str(path.absolute()), config=config) for path in files]
    batches = await asyncio.gather(*(linter.lint(request) for request in requests))
    return [record for batch in batches for record in batch]


@app.command("lint")
def lint_command(
    files: list[Path] = typer.Argument(..., help="Playbooks or task files to lint."),
    root: Path = typer.Option(Path("."), "--root", help="Directory holding pyproject.toml or .ansible-linting.toml."),
    executable: str | None = typer.Option(None, "--executable", help="ansible-lint executable path."),
    rules_dir: list[str] | None = typer.Option(None, "--rules-dir", "-r", help="Custom rules directory (repeatable)."),
    use_default_rules: bool | None = typer.Option(
        None,
        "--use-default-rules/--no-default-rules",
        help="Keep the default rules when custom rules directories are given.",
    ),
    exclude_dir: list[str] | None = typer.Option(None, "--exclude-dir", help="Directory to exclude (repeatable)."),
    use_project_config: bool | None = typer.Option(
        None,
        "--use-project-config/--no-project-config",
        help="Use the project's .ansible-lint file instead of rule, exclude and skip settings.",
    ),
    blacklist: str | None = typer.Option(None, "--blacklist", help="Regex of file paths to skip."),
    skip_tags: str | None = typer.Option(None, "--skip-tags", "-x", help="Comma-delimited tags or rules to skip."),
    timeout: float | None = typer.Option(None, "--timeout", help="Seconds before a lint run is abandoned."),
    project_root: list[Path] | None = typer.Option(None, "--project-root", help="Open project folder (repeatable)."),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    no_emoji: bool = typer.Option(False, "--no-emoji", help="Disable emoji in messages."),
) -> None:
    """Lint FILES and print one line per diagnostic."""

    output = _validate_format(output_format)
    use_emoji = not no_emoji
    overrides: dict[str, Any] = {
        "executable": executable,
        "rules_dirs": rules_dir or None,
        "use_default_rules": use_default_rules,
        "exclude_dirs": exclude_dir or None,
        "use_project_config": use_project_config,
        "blacklist": blacklist,
        "skip_tags": skip_tags,
        "timeout": timeout,
        "project_roots": [str(path.absolute()) for path in project_root] if project_root else None,
    }
    config = _load_config(root, overrides, use_emoji=use_emoji)
    linter = AnsibleLinter(notifier=ConsoleNotifier(use_emoji=use_emoji))
    records = asyncio.run(_lint_files(linter, files, config))

    console = get_console_manager().get(color=output == "text", emoji=use_emoji)
    emit_records(records, console=console, output=output)
    counts = count_by_severity(records)
    if output == "text":
        summary = ", ".join(f"{counts[severity]} {severity.value}" for severity in Severity)
        info(f"{len(files)} file(s) linted: {summary}", use_emoji=use_emoji)
    raise typer.Exit(code=1 if counts[Severity.ERROR] else 0)


@app.command("check")
def check_command(
    root: Path = typer.Option(Path("."), "--root", help="Directory holding pyproject.toml or .ansible-linting.toml."),
    executable: str | None = typer.Option(None, "--executable", help="ansible-lint executable path."),
    no_emoji: bool = typer.Option(False, "--no-emoji", help="Disable emoji in messages."),
) -> None:
    """Check that the installed ansible-lint supports the features this integration relies on."""

    use_emoji = not no_emoji
    config = _load_config(root, {"executable": executable}, use_emoji=use_emoji)
    linter = AnsibleLinter(notifier=ConsoleNotifier(use_emoji=use_emoji))
    report = asyncio.run(linter.check_capabilities(config))
    if not report.probed:
        fail(f"Unable to run {config.executable}: {report.output}", use_emoji=use_emoji)
        raise typer.Exit(code=1)
    if report.supported:
        ok(f"{config.executable} is supported.", use_emoji=use_emoji)


@app.command("config")
def config_command(
    root: Path = typer.Option(Path("."), "--root", help="Directory holding pyproject.toml or .ansible-linting.toml."),
) -> None:
    """Print the effective configuration as JSON."""

    config = _load_config(root, {}, use_emoji=True)
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, sort_keys=True))


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
