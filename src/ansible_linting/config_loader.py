# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence and traceability."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Protocol

from .config import ConfigError, LintConfiguration, build_configuration

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "ansible-linting"
STANDALONE_FILENAME: Final[str] = ".ansible-linting.toml"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")
_PATH_KEYS: Final[frozenset[str]] = frozenset({"project_roots"})


class ConfigSource(Protocol):
    """A single layer of configuration data."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the raw configuration fragment contributed by this source."""
        ...


def _normalise_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``data`` with kebab-case keys rewritten to snake_case."""

    return {str(key).replace("-", "_"): value for key, value in data.items()}


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    expanded: dict[str, Any] = {}
    for key, value in data.items():
        expanded[key] = _expand_env_value(value, env)
    return expanded


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, list):
        return [_expand_env_value(item, env) for item in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_paths(data: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    """Anchor relative path-valued settings at ``base_dir``."""

    for key in _PATH_KEYS & data.keys():
        raw = data[key]
        entries = [raw] if isinstance(raw, str) else raw
        if not isinstance(entries, list):
            raise ConfigError(f"{key} must be an array of paths")
        resolved: list[str] = []
        for entry in entries:
            path = Path(str(entry)).expanduser()
            resolved.append(str(path if path.is_absolute() else base_dir / path))
        data[key] = resolved
    return data


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, env: Mapping[str, str] | None = None) -> None:
        self.path = path
        self.name = str(path)
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        document = self._read()
        return self._finalise(document)

    def _read(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self.path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Unable to read {self.path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError(f"Configuration at {self.path} must be a table")
        return dict(data)

    def _finalise(self, section: Mapping[str, Any]) -> dict[str, Any]:
        normalised = _normalise_keys(section)
        expanded = _expand_env(normalised, self._env)
        return _resolve_paths(expanded, self.path.parent)


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.ansible-linting]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        document = self._read()
        tool_section = document.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {self.path} must be a table")
        return self._finalise(section)


@dataclass(slots=True)
class FieldUpdate:
    """Description of a single configuration field set by a source."""

    field: str
    source: str
    value: Any


@dataclass(slots=True)
class ConfigLoadResult:
    """Container bundling a resolved config with provenance metadata."""

    config: LintConfiguration
    updates: list[FieldUpdate] = field(default_factory=list)


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, sources: list[ConfigSource]) -> None:
        self._sources = sources

    @classmethod
    def for_root(cls, root: Path, *, env: Mapping[str, str] | None = None) -> ConfigLoader:
        """Return a loader reading ``pyproject.toml`` then ``.ansible-linting.toml`` under ``root``.

        Args:
            root: Directory searched for configuration files.
            env: Environment used for variable expansion; defaults to ``os.environ``.

        Returns:
            ConfigLoader: Loader with the standard source order.
        """

        return cls(
            [
                PyProjectConfigSource(root / PYPROJECT_FILENAME, env=env),
                TomlConfigSource(root / STANDALONE_FILENAME, env=env),
            ]
        )

    def load(self, overrides: Mapping[str, Any] | None = None) -> LintConfiguration:
        """Return the merged configuration."""

        return self.load_with_trace(overrides).config

    def load_with_trace(self, overrides: Mapping[str, Any] | None = None) -> ConfigLoadResult:
        """Merge every source over the defaults and record where each field came from.

        Args:
            overrides: Highest-precedence values such as CLI flags; ``None`` values are skipped.

        Returns:
            ConfigLoadResult: Validated configuration plus per-field provenance.

        Raises:
            ConfigError: If a source is unreadable or the merged data fails validation.
        """

        merged: dict[str, Any] = {}
        updates: list[FieldUpdate] = []
        layers: list[tuple[str, Mapping[str, Any]]] = [(source.name, source.load()) for source in self._sources]
        if overrides:
            layers.append(("overrides", {key: value for key, value in overrides.items() if value is not None}))
        for name, fragment in layers:
            for key, value in fragment.items():
                merged[key] = value
                updates.append(FieldUpdate(field=key, source=name, value=value))
        return ConfigLoadResult(config=build_configuration(merged), updates=updates)


__all__ = [
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "FieldUpdate",
    "PyProjectConfigSource",
    "STANDALONE_FILENAME",
    "TomlConfigSource",
]
