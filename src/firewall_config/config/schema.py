"""
firewall-config — declarative schema and strict validation.

File: src/firewall_config/config/schema.py
Last updated: 2026-10-19

Purpose
- Describe every recognized key path of the current configuration format and
  validate merged documents against it.

What should be included in this file
- The closed schema tree (``SCHEMA``) built from ``Field``/``Section`` data.
- Strict unknown-key rejection with full key paths.
- Text-format conversion of leaf values into typed values.

Functional requirements
- Unknown keys, type mismatches, bad enum literals and missing required
  leaves are reported as distinct issue kinds.
- New keys are added by extending ``SCHEMA``, not control flow.

Non-functional requirements
- Deterministic issue order (sorted key walk).
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Literal, cast

from firewall_config.config.errors import ConfigIssue, IssueKind, error_for_issues
from firewall_config.config.model import (
    DistinguishedName,
    FirewallMode,
    NetworkHostAndPort,
    ProxyVersion,
    RevocationMode,
    SupportedCryptoService,
)
from firewall_config.constants import CONFIG_FORMAT_VERSION

FieldKind = Literal["string", "int", "bool", "path", "address", "address_list", "dn", "enum"]

_INTEGER_TEXT: Final[re.Pattern[str]] = re.compile(r"^[+-]?\d+$")
_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"true", "yes", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"false", "no", "off"})

_EXPECTED_LABEL: Final[dict[str, str]] = {
    "string": "string",
    "int": "integer",
    "bool": "boolean",
    "path": "path string",
    "address": "host:port string",
    "address_list": "list of host:port strings",
    "dn": "X.500 name string",
    "enum": "string",
}


@dataclass(frozen=True, slots=True)
class Field:
    """Leaf key declaration."""

    kind: FieldKind
    required: bool = False
    choices: type[Enum] | None = None


@dataclass(frozen=True, slots=True)
class Section:
    """Nested object declaration."""

    fields: Mapping[str, Field | Section]
    required_keys: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        required = frozenset(
            name for name, item in self.fields.items() if isinstance(item, Field) and item.required
        )
        object.__setattr__(self, "required_keys", required)


def _ssl_section() -> Section:
    return Section(
        {
            "sslKeystore": Field("path"),
            "keyStorePassword": Field("string", required=True),
            "keyStorePrivateKeyPassword": Field("string"),
            "trustStoreFile": Field("path"),
            "trustStorePassword": Field("string", required=True),
        }
    )


def _crypto_service_section() -> Section:
    return Section(
        {
            "name": Field("enum", required=True, choices=SupportedCryptoService),
            "conf": Field("path"),
        }
    )


SCHEMA: Final[Section] = Section(
    {
        "configVersion": Field("int"),
        "firewallMode": Field("enum", choices=FirewallMode),
        "certificatesDirectory": Field("path"),
        "sslKeystore": Field("path"),
        "trustStoreFile": Field("path"),
        "keyStorePassword": Field("string"),
        "keyStorePrivateKeyPassword": Field("string"),
        "trustStorePassword": Field("string"),
        "networkParametersPath": Field("path"),
        "useProxyForCrls": Field("bool"),
        "healthCheckPhrase": Field("string"),
        "revocationConfig": Section(
            {"mode": Field("enum", required=True, choices=RevocationMode)}
        ),
        "auditServiceConfiguration": Section(
            {"loggingIntervalSec": Field("int", required=True)}
        ),
        "p2pTlsSigningCryptoServiceConfig": _crypto_service_section(),
        "artemisCryptoServiceConfig": _crypto_service_section(),
        "tunnelingCryptoServiceConfig": _crypto_service_section(),
        "outboundConfig": Section(
            {
                "artemisBrokerAddress": Field("address", required=True),
                "artemisSSLConfiguration": _ssl_section(),
                "proxyConfig": Section(
                    {
                        "version": Field("enum", required=True, choices=ProxyVersion),
                        "proxyAddress": Field("address", required=True),
                        "userName": Field("string"),
                        "password": Field("string"),
                        "proxyTimeoutMS": Field("int"),
                    }
                ),
            }
        ),
        "inboundConfig": Section({"listeningAddress": Field("address", required=True)}),
        "bridgeInnerConfig": Section(
            {
                "floatAddresses": Field("address_list", required=True),
                "expectedCertificateSubject": Field("dn", required=True),
                "tunnelSSLConfiguration": _ssl_section(),
            }
        ),
        "floatOuterConfig": Section(
            {
                "floatAddress": Field("address", required=True),
                "expectedCertificateSubject": Field("dn", required=True),
                "tunnelSSLConfiguration": _ssl_section(),
            }
        ),
    }
)


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigIssue] = []

    def add(self, path: str, message: str, kind: IssueKind) -> None:
        self._items.append(ConfigIssue(path=path, message=message, kind=kind))

    def items(self) -> tuple[ConfigIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def iter_leaf_paths(
    section: Section = SCHEMA, prefix: tuple[str, ...] = ()
) -> Iterator[tuple[tuple[str, ...], Field]]:
    """Yield every recognized leaf key path with its declaration, sorted."""

    for name in sorted(section.fields):
        item = section.fields[name]
        path = (*prefix, name)
        if isinstance(item, Section):
            yield from iter_leaf_paths(item, path)
        else:
            yield path, item


def validate_document(document: Mapping[str, object]) -> dict[str, Any]:
    """Validate ``document`` against ``SCHEMA`` and return typed values.

    Raises the ``ConfigError`` subclass matching the most severe issue kind
    found; unknown keys win over type mismatches.
    """

    issues = _IssueCollector()
    normalized = _validate_section(document, SCHEMA, "", issues)
    if "configVersion" in normalized:
        _check_version(normalized["configVersion"], issues)
    if issues.has_issues:
        raise error_for_issues(issues.items())
    return normalized


def _check_version(found: int, issues: _IssueCollector) -> None:
    if found < 1:
        issues.add("configVersion", "configVersion must be >= 1", IssueKind.VALUE_CONSTRAINT)
    elif found > CONFIG_FORMAT_VERSION:
        issues.add(
            "configVersion",
            f"configVersion {found} is newer than supported {CONFIG_FORMAT_VERSION}; "
            "upgrade the firewall runtime",
            IssueKind.VALUE_CONSTRAINT,
        )


def _validate_section(
    payload: Mapping[str, object],
    section: Section,
    path: str,
    issues: _IssueCollector,
) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in sorted(payload, key=str):
        key_path = _join(path, str(key))
        declared = section.fields.get(key) if isinstance(key, str) else None
        if declared is None:
            issues.add(key_path, "unknown configuration key", IssueKind.UNKNOWN_KEY)
            continue
        value = payload[key]
        if isinstance(declared, Section):
            if not isinstance(value, Mapping):
                issues.add(
                    key_path,
                    f"expected object, got {type(value).__name__}",
                    IssueKind.TYPE_MISMATCH,
                )
                continue
            out[key] = _validate_section(value, declared, key_path, issues)
            continue
        parsed = _convert(value, declared, key_path, issues)
        if parsed is not None:
            out[key] = parsed

    for key in sorted(section.required_keys):
        if key not in payload:
            issues.add(_join(path, key), "missing required field", IssueKind.STRUCTURAL)
    return out


def _convert(value: object, declared: Field, path: str, issues: _IssueCollector) -> Any:
    if value is None:
        issues.add(path, "must not be null", IssueKind.TYPE_MISMATCH)
        return None
    kind = declared.kind
    if kind == "int":
        return _as_int(value, path, issues)
    if kind == "bool":
        return _as_bool(value, path, issues)
    if kind == "address_list":
        return _as_address_list(value, path, issues)

    text = _as_text(value, kind, path, issues)
    if text is None:
        return None
    if kind == "string":
        return text
    if kind == "path":
        if not text.strip() or "\x00" in text:
            issues.add(path, "must be a non-empty path without NUL bytes", IssueKind.TYPE_MISMATCH)
            return None
        return text.strip()
    if kind == "address":
        return _as_address(text, path, issues)
    if kind == "dn":
        try:
            return DistinguishedName.parse(text)
        except ValueError as exc:
            issues.add(path, f"expected X.500 name: {exc}", IssueKind.TYPE_MISMATCH)
            return None
    return _as_enum(text, declared, path, issues)


def _as_text(value: object, kind: str, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(
            path,
            f"expected {_EXPECTED_LABEL[kind]}, got {type(value).__name__}",
            IssueKind.TYPE_MISMATCH,
        )
        return None
    return value


def _as_int(value: object, path: str, issues: _IssueCollector) -> int | None:
    if isinstance(value, bool):
        issues.add(path, "expected integer, got bool", IssueKind.TYPE_MISMATCH)
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value.strip()):
        return int(value.strip())
    issues.add(path, f"expected integer, got {type(value).__name__}", IssueKind.TYPE_MISMATCH)
    return None


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _BOOLEAN_TRUE:
            return True
        if lowered in _BOOLEAN_FALSE:
            return False
    issues.add(path, f"expected boolean, got {type(value).__name__}", IssueKind.TYPE_MISMATCH)
    return None


def _as_address(text: str, path: str, issues: _IssueCollector) -> NetworkHostAndPort | None:
    try:
        return NetworkHostAndPort.parse(text)
    except ValueError as exc:
        issues.add(path, str(exc), IssueKind.TYPE_MISMATCH)
        return None


def _as_address_list(
    value: object, path: str, issues: _IssueCollector
) -> tuple[NetworkHostAndPort, ...] | None:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        issues.add(
            path,
            f"expected list of host:port strings, got {type(value).__name__}",
            IssueKind.TYPE_MISMATCH,
        )
        return None
    parsed: list[NetworkHostAndPort] = []
    ok = True
    for index, item in enumerate(value):
        item_path = f"{path}[{index}]"
        if not isinstance(item, str):
            issues.add(
                item_path,
                f"expected host:port string, got {type(item).__name__}",
                IssueKind.TYPE_MISMATCH,
            )
            ok = False
            continue
        address = _as_address(item, item_path, issues)
        if address is None:
            ok = False
            continue
        parsed.append(address)
    return tuple(parsed) if ok else None


def _as_enum(text: str, declared: Field, path: str, issues: _IssueCollector) -> Enum | None:
    choices = cast(type[Enum], declared.choices)
    candidate = text.strip()
    for member in choices:
        if member.value == candidate:
            return member
    expected = ", ".join(str(member.value) for member in choices)
    issues.add(
        path,
        f"invalid value {candidate!r} for {path}; expected one of: {expected}",
        IssueKind.VALUE_CONSTRAINT,
    )
    return None


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "Field",
    "FieldKind",
    "SCHEMA",
    "Section",
    "iter_leaf_paths",
    "validate_document",
]
