"""
firewall-config config package public API.

File: src/firewall_config/config/__init__.py
Last updated: 2026-10-19

Purpose
- Export the load entrypoints, the resolved model and the public error types.

What should be included in this file
- Loader APIs for the resolved runtime configuration and its redacted dump.
- Schema, dialect and mode tables used by callers that inspect documents.
- No filesystem access or logging setup at import time.

Functional requirements
- Support loading from a TOML/YAML file + ``FIREWALL_`` env overrides.
- Fail fast with typed, path-carrying configuration errors.
"""

from firewall_config.config.errors import (
    ConfigError,
    ConfigIssue,
    IssueKind,
    SourceUnreadableError,
    StructuralViolationError,
    TypeMismatchError,
    UnknownConfigurationKeyError,
    ValueConstraintError,
)
from firewall_config.config.legacy import ConfigDialect, detect_dialect, normalize_document
from firewall_config.config.loader import load_config, resolve_document
from firewall_config.config.model import (
    AuditServiceConfiguration,
    BridgeInnerConfig,
    CryptoServiceConfig,
    DistinguishedName,
    FirewallMode,
    FloatOuterConfig,
    InboundConfig,
    KeyStoreConfig,
    NetworkHostAndPort,
    OutboundConfig,
    ProxyConfig,
    ProxyVersion,
    ResolvedConfiguration,
    RevocationConfig,
    RevocationMode,
    SSLConfiguration,
    SupportedCryptoService,
    TrustStoreConfig,
)
from firewall_config.config.modes import SECTION_LEGALITY, resolve_mode
from firewall_config.config.redaction import redact_document, render_redacted
from firewall_config.config.schema import SCHEMA, validate_document
from firewall_config.config.sources import DEFAULT_DOCUMENT, read_layers

__all__ = [
    "AuditServiceConfiguration",
    "BridgeInnerConfig",
    "ConfigDialect",
    "ConfigError",
    "ConfigIssue",
    "CryptoServiceConfig",
    "DEFAULT_DOCUMENT",
    "DistinguishedName",
    "FirewallMode",
    "FloatOuterConfig",
    "InboundConfig",
    "IssueKind",
    "KeyStoreConfig",
    "NetworkHostAndPort",
    "OutboundConfig",
    "ProxyConfig",
    "ProxyVersion",
    "ResolvedConfiguration",
    "RevocationConfig",
    "RevocationMode",
    "SCHEMA",
    "SECTION_LEGALITY",
    "SSLConfiguration",
    "SourceUnreadableError",
    "StructuralViolationError",
    "SupportedCryptoService",
    "TrustStoreConfig",
    "TypeMismatchError",
    "UnknownConfigurationKeyError",
    "ValueConstraintError",
    "detect_dialect",
    "load_config",
    "normalize_document",
    "read_layers",
    "redact_document",
    "render_redacted",
    "resolve_document",
    "resolve_mode",
    "validate_document",
]
