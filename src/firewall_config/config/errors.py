"""
firewall-config — configuration error types.

File: src/firewall_config/config/errors.py
Last updated: 2026-10-19

Purpose
- Typed failures for every stage of the configuration pipeline.

Functional requirements
- Each failure kind is its own exception class so callers can tell a typo in a
  key name from a badly shaped value.
- Messages name the offending key path; they never echo secret values.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class IssueKind(str, Enum):
    """Category of a single configuration issue."""

    SOURCE_UNREADABLE = "source_unreadable"
    UNKNOWN_KEY = "unknown_configuration_key"
    TYPE_MISMATCH = "type_mismatch"
    STRUCTURAL = "structural_violation"
    VALUE_CONSTRAINT = "value_constraint_violation"


@dataclass(frozen=True, slots=True)
class ConfigIssue:
    """Single structured configuration failure."""

    path: str
    message: str
    kind: IssueKind


class ConfigError(ValueError):
    """Base class for all configuration load failures."""

    kind: IssueKind = IssueKind.VALUE_CONSTRAINT

    def __init__(self, issues: Sequence[ConfigIssue]) -> None:
        self.issues = tuple(issues)
        super().__init__(self._render())

    @classmethod
    def single(cls, path: str, message: str) -> ConfigError:
        return cls((ConfigIssue(path=path, message=message, kind=cls.kind),))

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(item.path for item in self.issues)

    def _render(self) -> str:
        if not self.issues:
            return "invalid configuration"
        if len(self.issues) == 1:
            item = self.issues[0]
            return f"{item.path}: {item.message}" if item.path else item.message
        rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        return f"invalid configuration:\n{rendered}"


class SourceUnreadableError(ConfigError):
    """Raised when the primary document cannot be read or parsed."""

    kind = IssueKind.SOURCE_UNREADABLE


class UnknownConfigurationKeyError(ConfigError):
    """Raised when the document carries keys outside the closed schema."""

    kind = IssueKind.UNKNOWN_KEY

    @property
    def unknown_keys(self) -> tuple[str, ...]:
        return self.paths

    def _render(self) -> str:
        keys = ", ".join(self.paths)
        return f"Unknown configuration keys: [{keys}]"


class TypeMismatchError(ConfigError):
    """Raised when a recognized key holds a value of the wrong type."""

    kind = IssueKind.TYPE_MISMATCH


class StructuralViolationError(ConfigError):
    """Raised when required sections are missing or forbidden ones present."""

    kind = IssueKind.STRUCTURAL


class ValueConstraintError(ConfigError):
    """Raised when a well-typed value breaks a documented constraint."""

    kind = IssueKind.VALUE_CONSTRAINT

    def _render(self) -> str:
        # Constraint messages are fixed, operator-facing sentences.
        return "\n".join(item.message for item in self.issues) or "invalid configuration"


_ERROR_TYPES: dict[IssueKind, type[ConfigError]] = {
    IssueKind.SOURCE_UNREADABLE: SourceUnreadableError,
    IssueKind.UNKNOWN_KEY: UnknownConfigurationKeyError,
    IssueKind.TYPE_MISMATCH: TypeMismatchError,
    IssueKind.STRUCTURAL: StructuralViolationError,
    IssueKind.VALUE_CONSTRAINT: ValueConstraintError,
}

# Reporting order when one pass collects several kinds of issue.
_KIND_PRIORITY: tuple[IssueKind, ...] = (
    IssueKind.SOURCE_UNREADABLE,
    IssueKind.UNKNOWN_KEY,
    IssueKind.TYPE_MISMATCH,
    IssueKind.STRUCTURAL,
    IssueKind.VALUE_CONSTRAINT,
)


def error_for_issues(issues: Sequence[ConfigIssue]) -> ConfigError:
    """Build the error for the highest-priority kind present in ``issues``."""

    for kind in _KIND_PRIORITY:
        selected = [item for item in issues if item.kind is kind]
        if selected:
            return _ERROR_TYPES[kind](selected)
    return ConfigError(issues)


__all__ = [
    "ConfigError",
    "ConfigIssue",
    "IssueKind",
    "SourceUnreadableError",
    "StructuralViolationError",
    "TypeMismatchError",
    "UnknownConfigurationKeyError",
    "ValueConstraintError",
    "error_for_issues",
]
