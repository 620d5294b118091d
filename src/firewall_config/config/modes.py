"""Firewall mode selection and per-mode section legality."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

from firewall_config.config.errors import (
    ConfigIssue,
    IssueKind,
    StructuralViolationError,
)
from firewall_config.config.model import FirewallMode

MODE_KEY: Final[str] = "firewallMode"

MODE_SECTIONS: Final[tuple[str, ...]] = (
    "outboundConfig",
    "inboundConfig",
    "bridgeInnerConfig",
    "floatOuterConfig",
)

# True: section must be present. False: section must be absent.
SECTION_LEGALITY: Final[Mapping[FirewallMode, Mapping[str, bool]]] = MappingProxyType(
    {
        FirewallMode.SENDER_RECEIVER: MappingProxyType(
            {
                "outboundConfig": True,
                "inboundConfig": True,
                "bridgeInnerConfig": False,
                "floatOuterConfig": False,
            }
        ),
        FirewallMode.BRIDGE_INNER: MappingProxyType(
            {
                "outboundConfig": True,
                "inboundConfig": False,
                "bridgeInnerConfig": True,
                "floatOuterConfig": False,
            }
        ),
        FirewallMode.FLOAT_OUTER: MappingProxyType(
            {
                "outboundConfig": False,
                "inboundConfig": True,
                "bridgeInnerConfig": False,
                "floatOuterConfig": True,
            }
        ),
    }
)


def required_sections(mode: FirewallMode) -> frozenset[str]:
    return frozenset(name for name, needed in SECTION_LEGALITY[mode].items() if needed)


def forbidden_sections(mode: FirewallMode) -> frozenset[str]:
    return frozenset(name for name, needed in SECTION_LEGALITY[mode].items() if not needed)


def resolve_mode(document: Mapping[str, Any]) -> FirewallMode:
    """Return the document's mode after enforcing ``SECTION_LEGALITY``.

    ``document`` is the schema-validated form, so the mode (when present) is
    already a ``FirewallMode`` member.
    """

    mode = document.get(MODE_KEY)
    if not isinstance(mode, FirewallMode):
        raise StructuralViolationError.single(MODE_KEY, f"{MODE_KEY} is required")

    issues: list[ConfigIssue] = []
    for section in MODE_SECTIONS:
        present = document.get(section) is not None
        needed = SECTION_LEGALITY[mode][section]
        if needed and not present:
            issues.append(
                ConfigIssue(
                    path=section,
                    message=f"{section} is required when {MODE_KEY} is {mode.value}",
                    kind=IssueKind.STRUCTURAL,
                )
            )
        elif present and not needed:
            issues.append(
                ConfigIssue(
                    path=section,
                    message=f"{section} is not allowed when {MODE_KEY} is {mode.value}",
                    kind=IssueKind.STRUCTURAL,
                )
            )
    if issues:
        raise StructuralViolationError(issues)
    return mode


__all__ = [
    "MODE_KEY",
    "MODE_SECTIONS",
    "SECTION_LEGALITY",
    "forbidden_sections",
    "required_sections",
    "resolve_mode",
]
