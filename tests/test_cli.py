# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests driven through Typer's runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ansible_linting.cli import app
from ansible_linting.linter import UNEXPECTED_FAILURE_HEADLINE, UPGRADE_HEADLINE
from ansible_linting.runtime.console.manager import get_console_manager


@pytest.fixture(autouse=True)
def _fresh_consoles() -> None:
    get_console_manager().reset()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_lint_prints_findings_as_text(runner: CliRunner, fake_tool, playbook: Path, tmp_path: Path) -> None:
    script = fake_tool(stdout=f"{playbook}:4: [E301] Commands should not change things if nothing needs doing\n", exit_code=2)

    result = runner.invoke(
        app,
        ["lint", str(playbook), "--root", str(tmp_path), "--executable", str(script), "--no-emoji"],
    )

    assert result.exit_code == 0, result.output
    assert f"{playbook}:4:1 warning Commands should not change things if nothing needs doing" in result.output
    assert "1 file(s) linted: 0 error, 1 warning, 0 info" in result.output


def test_lint_json_output(runner: CliRunner, fake_tool, playbook: Path, tmp_path: Path) -> None:
    script = fake_tool(stdout=f"{playbook}:1: [E201] Trailing whitespace\n", exit_code=2)

    result = runner.invoke(
        app,
        ["lint", str(playbook), "--root", str(tmp_path), "--executable", str(script), "--format", "json"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {
            "severity": "warning",
            "excerpt": "Trailing whitespace",
            "location": {"file": str(playbook), "position": [[0, 0], [0, 1]]},
        }
    ]


def test_lint_forwards_selection_flags(runner: CliRunner, fake_tool, playbook: Path, tmp_path: Path) -> None:
    script = fake_tool()

    result = runner.invoke(
        app,
        [
            "lint",
            str(playbook),
            "--root",
            str(tmp_path),
            "--executable",
            str(script),
            "-x",
            "formatting",
            "--rules-dir",
            "/opt/rules",
            "--use-default-rules",
            "--exclude-dir",
            "roles/vendor",
        ],
    )

    assert result.exit_code == 0, result.output
    call = json.loads(script.with_name("ansible-lint.calls").read_text(encoding="utf-8").splitlines()[0])
    assert call["argv"] == [
        "-p",
        "--nocolor",
        "-x",
        "formatting",
        "-R",
        "-r",
        "/opt/rules",
        "--exclude",
        "roles/vendor",
        str(playbook),
    ]


def test_lint_exits_non_zero_on_error_records(runner: CliRunner, fake_tool, playbook: Path, tmp_path: Path) -> None:
    script = fake_tool(stderr="WARNING: Couldn't open roles/db/tasks/main.yml - No such file or directory\n", exit_code=1)

    result = runner.invoke(
        app,
        ["lint", str(playbook), "--root", str(tmp_path), "--executable", str(script), "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "Missing file roles/db/tasks/main.yml" in result.output


def test_lint_reports_unexpected_failures(runner: CliRunner, fake_tool, playbook: Path, tmp_path: Path) -> None:
    script = fake_tool(stderr="Segmentation fault\n", exit_code=139)

    result = runner.invoke(
        app,
        ["lint", str(playbook), "--root", str(tmp_path), "--executable", str(script), "--no-emoji"],
    )

    assert result.exit_code == 0
    assert UNEXPECTED_FAILURE_HEADLINE in result.output
    assert "Segmentation fault" in result.output


def test_lint_skips_blacklisted_files(runner: CliRunner, fake_tool, playbook: Path, tmp_path: Path) -> None:
    script = fake_tool()

    result = runner.invoke(
        app,
        ["lint", str(playbook), "--root", str(tmp_path), "--executable", str(script), "--blacklist", "site\\.yml$"],
    )

    assert result.exit_code == 0
    assert not script.with_name("ansible-lint.calls").exists()


def test_lint_rejects_unknown_format(runner: CliRunner, playbook: Path) -> None:
    result = runner.invoke(app, ["lint", str(playbook), "--format", "xml"])

    assert result.exit_code == 2


def test_invalid_configuration_exits_with_two(runner: CliRunner, playbook: Path, tmp_path: Path) -> None:
    (tmp_path / ".ansible-linting.toml").write_text("timeout = -1\n", encoding="utf-8")

    result = runner.invoke(app, ["lint", str(playbook), "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_config_command_prints_effective_settings(runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.ansible-linting]\nskip-tags = "formatting"\n', encoding="utf-8")

    result = runner.invoke(app, ["config", "--root", str(tmp_path)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["skip_tags"] == "formatting"
    assert payload["executable"] == "ansible-lint"


def test_check_accepts_current_release(runner: CliRunner, fake_tool, tmp_path: Path) -> None:
    script = fake_tool(stdout="ANSIBLE0001: repeatability\n")

    result = runner.invoke(app, ["check", "--root", str(tmp_path), "--executable", str(script), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "is supported." in result.output


def test_check_warns_about_old_release(runner: CliRunner, fake_tool, tmp_path: Path) -> None:
    script = fake_tool(stdout="formatting\n")

    result = runner.invoke(app, ["check", "--root", str(tmp_path), "--executable", str(script), "--no-emoji"])

    assert result.exit_code == 0
    assert UPGRADE_HEADLINE in result.output


def test_check_fails_when_tool_cannot_run(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["check", "--root", str(tmp_path), "--executable", "definitely-not-ansible-lint-xyz", "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "Unable to run definitely-not-ansible-lint-xyz" in result.output
