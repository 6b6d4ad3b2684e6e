# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build ansible-lint command lines from a configuration snapshot."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import PROJECT_CONFIG_FILENAME, LintConfiguration
from .project import resolve_project_root

LOGGER = logging.getLogger(__name__)

PEP8_FORMAT_FLAG: Final[str] = "-p"
NO_COLOR_FLAG: Final[str] = "--nocolor"
CONFIG_FILE_FLAG: Final[str] = "-c"
SKIP_TAGS_FLAG: Final[str] = "-x"
DEFAULT_RULES_FLAG: Final[str] = "-R"
RULES_DIR_FLAG: Final[str] = "-r"
EXCLUDE_FLAG: Final[str] = "--exclude"
BASE_FLAGS: Final[tuple[str, ...]] = (PEP8_FORMAT_FLAG, NO_COLOR_FLAG)


class LintCommand(BaseModel):
    """Argument vector and working directory for one ansible-lint run."""

    model_config = ConfigDict(frozen=True)

    args: tuple[str, ...] = Field(min_length=1)
    cwd: Path

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: Sequence[str]) -> tuple[str, ...]:
        """Return command arguments as a tuple of strings."""

        return tuple(str(item) for item in value)

    @property
    def executable(self) -> str:
        """Return the executable the command runs."""

        return self.args[0]

    @property
    def target(self) -> str:
        """Return the file handed to the tool as the final positional argument."""

        return self.args[-1]


def is_blacklisted(config: LintConfiguration, file_path: str) -> bool:
    """Return ``True`` when the configured blacklist matches ``file_path``.

    Args:
        config: Configuration snapshot holding the blacklist pattern.
        file_path: Absolute path of the file about to be linted.

    Returns:
        bool: ``True`` when linting should be skipped entirely.
    """

    pattern = config.blacklist_pattern
    return pattern is not None and pattern.search(file_path) is not None


def _project_config_args(config: LintConfiguration, file_path: str) -> list[str]:
    root = resolve_project_root(file_path, config.project_roots)
    return [CONFIG_FILE_FLAG, str(root / PROJECT_CONFIG_FILENAME)]


def _selection_args(config: LintConfiguration) -> list[str]:
    args: list[str] = []
    if config.skip_tags:
        args.extend([SKIP_TAGS_FLAG, config.skip_tags])

    rules_dirs = config.custom_rules_dirs
    if rules_dirs:
        if config.use_default_rules:
            args.append(DEFAULT_RULES_FLAG)
        for directory in rules_dirs:
            args.extend([RULES_DIR_FLAG, directory])

    for directory in config.custom_exclude_dirs:
        args.extend([EXCLUDE_FLAG, directory])
    return args


def build_lint_command(config: LintConfiguration, file_path: str) -> LintCommand | None:
    """Assemble the ansible-lint invocation for ``file_path``.

    The working directory is the file's own directory: ansible-lint resolves
    relative includes and roles against where it runs, not against the path
    it is given. A project ``.ansible-lint`` file, when enabled, replaces the
    skip, rule and exclude settings.

    Args:
        config: Configuration snapshot for this request.
        file_path: Absolute path of the file to lint.

    Returns:
        LintCommand | None: The command to run, or ``None`` when the file is blacklisted.

    Raises:
        TypeError: If ``file_path`` is ``None``; an unsaved buffer has no directory.
    """

    working_dir = Path(os.path.dirname(file_path))
    if is_blacklisted(config, file_path):
        LOGGER.debug("skipping blacklisted file %s", file_path)
        return None

    args = [config.executable, *BASE_FLAGS]
    if config.use_project_config:
        args.extend(_project_config_args(config, file_path))
    else:
        args.extend(_selection_args(config))
    args.append(file_path)
    return LintCommand(args=args, cwd=working_dir)


__all__ = [
    "BASE_FLAGS",
    "LintCommand",
    "build_lint_command",
    "is_blacklisted",
]
