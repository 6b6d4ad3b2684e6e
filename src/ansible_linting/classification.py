# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Classify failed ansible-lint runs into editor diagnostics.

ansible-lint reports environment problems (missing includes, vaulted files,
YAML errors, ...) as free text whose wording changes between releases. Each
known shape is one :class:`FailureRule` row in :data:`FAILURE_RULES`; rows are
tried in order and the first match decides the outcome. Supporting a new
wording means adding a row.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from .core.models import DiagnosticRecord
from .core.severity import Severity

UNSAVED_BUFFER_LABEL: Final[str] = "Save this playbook."
UNCLASSIFIED: Final[str] = "unclassified"
UNKNOWN_FILE_LABEL: Final[str] = "A referenced file"

FailureBuilder = Callable[[re.Match[str], str], DiagnosticRecord]


@dataclass(frozen=True, slots=True)
class FailureRule:
    """One row of the failure classification table.

    Attributes:
        name: Stable identifier of the failure bucket.
        pattern: Expression searched for anywhere in the failure text.
        build: Factory turning the match and the requested file into a record.
    """

    name: str
    pattern: re.Pattern[str]
    build: FailureBuilder


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of classifying one failure message."""

    rule: str
    records: tuple[DiagnosticRecord, ...] = field(default_factory=tuple)

    @property
    def recognised(self) -> bool:
        """Return ``True`` when a table row matched."""

        return self.rule != UNCLASSIFIED


def first_group(match: re.Match[str]) -> str | None:
    """Return the first populated capture group of ``match``, if any."""

    for value in match.groups():
        if value:
            return value
    return None


def _missing_file(match: re.Match[str], file_path: str) -> DiagnosticRecord:
    return DiagnosticRecord.at_file_start(
        Severity.ERROR,
        f"Missing file {match.group(1)}. Please fix before continuing linter use.",
        file_path,
    )


def _unreadable_file(match: re.Match[str], file_path: str) -> DiagnosticRecord:
    # The path lands in a different group depending on the ansible-lint release.
    unreadable = first_group(match) or UNKNOWN_FILE_LABEL
    return DiagnosticRecord.at_file_start(
        Severity.ERROR,
        f"{unreadable} is unreadable or not a file. Please fix before continuing linter use.",
        file_path,
    )


def _syntax_error(match: re.Match[str], file_path: str) -> DiagnosticRecord:
    del match
    return DiagnosticRecord.at_file_start(
        Severity.ERROR,
        "This file, an include, or role, has a syntax error. Please fix before continuing linter use.",
        file_path,
    )


def _vault_encrypted(match: re.Match[str], file_path: str) -> DiagnosticRecord:
    del match
    return DiagnosticRecord.at_file_start(
        Severity.INFO,
        "File must be decrypted with ansible-vault prior to linting.",
        file_path,
    )


def _unsaved_buffer(match: re.Match[str], file_path: str) -> DiagnosticRecord:
    del match, file_path
    return DiagnosticRecord.at_file_start(
        Severity.INFO,
        "Ansible-Lint cannot reliably lint on stdin due to nonexistent pathing on includes and roles. "
        "Please save this playbook to your filesystem.",
        UNSAVED_BUFFER_LABEL,
    )


FAILURE_RULES: Final[tuple[FailureRule, ...]] = (
    FailureRule(
        name="missing-file",
        pattern=re.compile(r"WARNING: Couldn't open (.*) - No such file or directory"),
        build=_missing_file,
    ),
    FailureRule(
        name="unreadable-file",
        pattern=re.compile(
            r"the file_name (.*) does not exist, or is not readable"
            r"|Could not find or access '(.*)'"
            r"|error occurred while trying to read the file '(.*)'"
        ),
        build=_unreadable_file,
    ),
    FailureRule(
        name="syntax-error",
        pattern=re.compile(
            r"raise Ansible(?:Parser)?Error|Syntax Error while loading YAML|Couldn't parse task at|AttributeError"
        ),
        build=_syntax_error,
    ),
    FailureRule(
        name="vault-encrypted",
        pattern=re.compile(r"vault password.*decrypt", re.DOTALL),
        build=_vault_encrypted,
    ),
    FailureRule(
        name="unsaved-buffer",
        pattern=re.compile(r"\.dirname|expected str, bytes or os\.PathLike object, not NoneType"),
        build=_unsaved_buffer,
    ),
)


def classify_failure(
    message: str,
    file_path: str | None,
    *,
    rules: tuple[FailureRule, ...] = FAILURE_RULES,
) -> Classification:
    """Map a failure message onto the first matching rule.

    Args:
        message: Combined stderr/stdout text of the failed run.
        file_path: File the lint request was for; ``None`` for an unsaved buffer.
        rules: Ordered classification table.

    Returns:
        Classification: The matching rule name and its single record, or an
        unclassified outcome with no records.
    """

    anchor = file_path if file_path is not None else UNSAVED_BUFFER_LABEL
    for rule in rules:
        match = rule.pattern.search(message)
        if match is not None:
            return Classification(rule=rule.name, records=(rule.build(match, anchor),))
    return Classification(rule=UNCLASSIFIED)


__all__ = [
    "Classification",
    "FAILURE_RULES",
    "FailureRule",
    "UNCLASSIFIED",
    "UNSAVED_BUFFER_LABEL",
    "classify_failure",
    "first_group",
]
