# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the ansible-lint integration."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_EXECUTABLE: Final[str] = "ansible-lint"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0
PROJECT_CONFIG_FILENAME: Final[str] = ".ansible-lint"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def _configured_entries(values: Sequence[str]) -> tuple[str, ...]:
    """Return the usable entries of a directory list setting.

    A list whose first element is blank is the "not configured" placeholder
    and yields nothing. Blank entries after the first are dropped.

    Args:
        values: Raw directory entries in configured order.

    Returns:
        tuple[str, ...]: Non-blank entries in their original order.
    """

    if not values or not values[0].strip():
        return ()
    return tuple(entry for entry in values if entry.strip())


class LintConfiguration(BaseModel):
    """Immutable snapshot of the user's ansible-lint settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: str = DEFAULT_EXECUTABLE
    rules_dirs: tuple[str, ...] = Field(default_factory=tuple)
    use_default_rules: bool = False
    exclude_dirs: tuple[str, ...] = Field(default_factory=tuple)
    use_project_config: bool = False
    blacklist: str = ""
    skip_tags: str = ""
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    project_roots: tuple[Path, ...] = Field(default_factory=tuple)

    @field_validator("executable")
    @classmethod
    def _require_executable(cls, value: str) -> str:
        """Reject blank executable paths.

        Args:
            value: Candidate executable name or path.

        Returns:
            str: The stripped executable.

        Raises:
            ValueError: If ``value`` is blank.
        """

        stripped = value.strip()
        if not stripped:
            raise ValueError("executable must not be blank")
        return stripped

    @field_validator("rules_dirs", "exclude_dirs", mode="before")
    @classmethod
    def _coerce_dirs(cls, value: str | Sequence[str] | None) -> tuple[str, ...]:
        """Accept a single string or any sequence of strings for directory lists."""

        if value is None:
            return ()
        if isinstance(value, (str, Path)):
            return (str(value),)
        return tuple(str(entry) for entry in value)

    @field_validator("blacklist")
    @classmethod
    def _compile_blacklist(cls, value: str) -> str:
        """Ensure the blacklist is a valid regular expression.

        Args:
            value: Regular expression source, empty when disabled.

        Returns:
            str: The unchanged pattern source.

        Raises:
            ValueError: If the pattern does not compile.
        """

        if value:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid blacklist pattern {value!r}: {exc}") from exc
        return value

    @property
    def custom_rules_dirs(self) -> tuple[str, ...]:
        """Return configured rule directories, empty when left at the placeholder."""

        return _configured_entries(self.rules_dirs)

    @property
    def custom_exclude_dirs(self) -> tuple[str, ...]:
        """Return configured exclude directories, empty when left at the placeholder."""

        return _configured_entries(self.exclude_dirs)

    @property
    def blacklist_pattern(self) -> re.Pattern[str] | None:
        """Return the compiled blacklist, or ``None`` when disabled."""

        return re.compile(self.blacklist) if self.blacklist else None

    def with_overrides(self, overrides: Mapping[str, Any]) -> LintConfiguration:
        """Return a new snapshot with ``overrides`` applied.

        Args:
            overrides: Field names mapped to replacement values. ``None`` values are ignored.

        Returns:
            LintConfiguration: Validated configuration including the overrides.

        Raises:
            ConfigError: If an override names an unknown field or fails validation.
        """

        payload = self.model_dump()
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return build_configuration(payload)


def build_configuration(data: Mapping[str, Any]) -> LintConfiguration:
    """Validate ``data`` into a :class:`LintConfiguration`.

    Args:
        data: Mapping of configuration field names to raw values.

    Returns:
        LintConfiguration: Validated configuration snapshot.

    Raises:
        ConfigError: If validation fails.
    """

    try:
        return LintConfiguration.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "ConfigError",
    "DEFAULT_EXECUTABLE",
    "DEFAULT_TIMEOUT_SECONDS",
    "LintConfiguration",
    "PROJECT_CONFIG_FILENAME",
    "build_configuration",
]
