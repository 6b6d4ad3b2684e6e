# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Utilities for reasoning about the project that owns a linted file."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from .config import PROJECT_CONFIG_FILENAME

PROJECT_MARKERS: Final[tuple[str, ...]] = (
    PROJECT_CONFIG_FILENAME,
    ".git",
    "ansible.cfg",
    "galaxy.yml",
)


def _absolute(path: str | os.PathLike[str]) -> Path:
    """Return ``path`` made absolute and lexically normalised, without following symlinks."""

    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def _containing_roots(file_path: Path, project_roots: Iterable[Path]) -> list[Path]:
    roots = [_absolute(root) for root in project_roots]
    return [root for root in roots if file_path == root or root in file_path.parents]


def find_marker_root(start: Path, markers: Sequence[str] = PROJECT_MARKERS) -> Path | None:
    """Walk upward from ``start`` and return the first directory holding a marker.

    Args:
        start: Directory the search begins in.
        markers: File or directory names identifying a project root.

    Returns:
        Path | None: The closest ancestor containing a marker, or ``None``.
    """

    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in markers):
            return candidate
    return None


def resolve_project_root(
    file_path: str | os.PathLike[str],
    project_roots: Sequence[Path] = (),
) -> Path:
    """Return the project root that owns ``file_path``.

    Explicit host project roots take precedence; the deepest one containing
    the file wins. Without a match the filesystem is searched upward for
    :data:`PROJECT_MARKERS`, falling back to the file's own directory.

    Args:
        file_path: Absolute path of the linted file.
        project_roots: Project folders currently open in the host.

    Returns:
        Path: Absolute project root directory.
    """

    target = _absolute(file_path)
    containing = _containing_roots(target, project_roots)
    if containing:
        return max(containing, key=lambda root: len(root.parts))
    return find_marker_root(target.parent) or target.parent


__all__ = ["PROJECT_MARKERS", "find_marker_root", "resolve_project_root"]
