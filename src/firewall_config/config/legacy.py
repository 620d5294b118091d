"""
firewall-config — legacy dialect alias mapping.

File: src/firewall_config/config/legacy.py
Last updated: 2026-10-19

Purpose
- Rewrite pre-v4 ("bridge.conf") documents into the current nested shape
  before strict validation runs.

What should be included in this file
- Dialect detection from a small set of marker keys.
- A declarative alias table (old key path -> new key path).
- Folding of the deprecated ``crlCheckSoftFail`` flag into
  ``revocationConfig.mode``.

Functional requirements
- Idempotent on current documents.
- An old key and its replacement with different values is an error;
  equal values collapse.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Final

import structlog

from firewall_config.config.errors import TypeMismatchError, ValueConstraintError
from firewall_config.config.model import RevocationMode
from firewall_config.config.rules import reconcile_revocation
from firewall_config.constants import LEGACY_CONFIG_FORMAT_VERSION

_log = structlog.get_logger(__name__)

LEGACY_SOFT_FAIL_KEY: Final[str] = "crlCheckSoftFail"


class ConfigDialect(str, Enum):
    V3 = "v3"
    V4 = "v4"


# Any of these key names anywhere in the document marks the v3 dialect.
_V3_MARKER_KEYS: Final[frozenset[str]] = frozenset(
    {"bridgeMode", "socksProxyConfig", "customSSLConfiguration"}
)

_V3_ALIASES: Final[tuple[tuple[tuple[str, ...], tuple[str, ...]], ...]] = (
    (("bridgeMode",), ("firewallMode",)),
    (("outboundConfig", "socksProxyConfig"), ("outboundConfig", "proxyConfig")),
    (
        ("outboundConfig", "customSSLConfiguration"),
        ("outboundConfig", "artemisSSLConfiguration"),
    ),
    (
        ("bridgeInnerConfig", "customSSLConfiguration"),
        ("bridgeInnerConfig", "tunnelSSLConfiguration"),
    ),
    (
        ("floatOuterConfig", "customSSLConfiguration"),
        ("floatOuterConfig", "tunnelSSLConfiguration"),
    ),
)

# SSL sections that carried their own soft-fail flag in v3.
_SSL_SECTIONS: Final[tuple[tuple[str, ...], ...]] = (
    ("outboundConfig", "artemisSSLConfiguration"),
    ("bridgeInnerConfig", "tunnelSSLConfiguration"),
    ("floatOuterConfig", "tunnelSSLConfiguration"),
)

_BOOLEAN_TEXT: Final[dict[str, bool]] = {
    "true": True,
    "yes": True,
    "on": True,
    "false": False,
    "no": False,
    "off": False,
}
_REVOCATION_LITERALS: Final[frozenset[str]] = frozenset(member.value for member in RevocationMode)
_INTEGER_TEXT: Final[re.Pattern[str]] = re.compile(r"^[+-]?\d+$")


def detect_dialect(document: Mapping[str, object]) -> ConfigDialect:
    """Classify ``document`` by marker keys or an explicit ``configVersion``."""

    version = _config_version(document.get("configVersion"))
    if version is not None and version <= LEGACY_CONFIG_FORMAT_VERSION:
        return ConfigDialect.V3
    if _contains_any_key(document, _V3_MARKER_KEYS):
        return ConfigDialect.V3
    return ConfigDialect.V4


def _config_version(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value.strip()):
        return int(value.strip())
    return None


def normalize_document(document: Mapping[str, object]) -> dict[str, Any]:
    """Return ``document`` rewritten into the current key layout."""

    out = copy.deepcopy(dict(document))
    dialect = detect_dialect(out)
    if dialect is ConfigDialect.V3:
        for old_path, new_path in _V3_ALIASES:
            _move_key(out, old_path, new_path)
        for section_path in _SSL_SECTIONS:
            _move_key(out, (*section_path, LEGACY_SOFT_FAIL_KEY), (LEGACY_SOFT_FAIL_KEY,))
        # configVersion describes the source dialect only.
        out.pop("configVersion", None)
    _fold_soft_fail(out)
    return out


def _fold_soft_fail(document: dict[str, Any]) -> None:
    if LEGACY_SOFT_FAIL_KEY not in document:
        return
    raw = document.pop(LEGACY_SOFT_FAIL_KEY)
    legacy = _as_legacy_bool(raw)
    _log.warning(
        "deprecated_config_key",
        key=LEGACY_SOFT_FAIL_KEY,
        replacement="revocationConfig.mode",
    )

    revocation = document.get("revocationConfig")
    current: RevocationMode | None = None
    if revocation is not None and not isinstance(revocation, Mapping):
        return
    if isinstance(revocation, Mapping) and revocation.get("mode") is not None:
        mode = revocation["mode"]
        if not isinstance(mode, str) or mode.strip() not in _REVOCATION_LITERALS:
            # Left for the schema validator to report.
            return
        current = RevocationMode(mode.strip())

    effective = reconcile_revocation(legacy, current)
    section = dict(revocation) if isinstance(revocation, Mapping) else {}
    section["mode"] = effective.value
    document["revocationConfig"] = section


def _as_legacy_bool(raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in _BOOLEAN_TEXT:
        return _BOOLEAN_TEXT[raw.strip().lower()]
    raise TypeMismatchError.single(
        LEGACY_SOFT_FAIL_KEY, f"expected boolean, got {type(raw).__name__}"
    )


def _move_key(
    document: dict[str, Any], old_path: tuple[str, ...], new_path: tuple[str, ...]
) -> None:
    old_parent = _parent(document, old_path)
    if old_parent is None or old_path[-1] not in old_parent:
        return
    value = old_parent.pop(old_path[-1])
    old_name = ".".join(old_path)
    new_name = ".".join(new_path)
    _log.warning("deprecated_config_key", key=old_name, replacement=new_name)

    new_parent = _parent(document, new_path, create=True)
    if new_parent is None:
        raise TypeMismatchError.single(
            ".".join(new_path[:-1]), f"expected object to hold {new_name}"
        )
    leaf = new_path[-1]
    if leaf in new_parent and new_parent[leaf] != value:
        raise ValueConstraintError.single(
            new_name,
            f"{old_name} and {new_name} are both set with different values; remove {old_name}",
        )
    new_parent[leaf] = value


def _parent(
    document: dict[str, Any], path: tuple[str, ...], *, create: bool = False
) -> dict[str, Any] | None:
    cursor: dict[str, Any] = document
    for part in path[:-1]:
        child = cursor.get(part)
        if not isinstance(child, dict):
            if not create or child is not None:
                return None
            child = {}
            cursor[part] = child
        cursor = child
    return cursor


def _contains_any_key(payload: Mapping[str, object], keys: frozenset[str]) -> bool:
    for key, value in payload.items():
        if key in keys:
            return True
        if isinstance(value, Mapping) and _contains_any_key(value, keys):
            return True
    return False


__all__ = [
    "ConfigDialect",
    "LEGACY_SOFT_FAIL_KEY",
    "detect_dialect",
    "normalize_document",
]
