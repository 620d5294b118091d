"""
firewall-config — cross-field validation rules.

File: src/firewall_config/config/rules.py
Last updated: 2026-10-19

Purpose
- Independent checks that look at more than one field, plus the documented
  defaulting rules that depend on other fields.

Functional requirements
- Every rule fails with its own fixed, operator-facing message naming the
  field and the offending value (never a secret).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from firewall_config.config.errors import StructuralViolationError, ValueConstraintError
from firewall_config.config.model import (
    AuditServiceConfiguration,
    NetworkHostAndPort,
    ProxyVersion,
    RevocationMode,
    SupportedCryptoService,
)
from firewall_config.constants import DEFAULT_AUDIT_LOGGING_INTERVAL_SEC


def resolve_entry_password(store_password: str, entry_password: str | None) -> str:
    """The private-key password falls back to the keystore password."""

    if entry_password is None:
        return store_password
    return entry_password


def check_no_unspecified_addresses(
    addresses: Sequence[NetworkHostAndPort], field_name: str
) -> None:
    for address in addresses:
        if address.is_unspecified:
            raise ValueConstraintError.single(
                field_name, f"{address.host} is not allowed in {field_name}"
            )


def check_float_addresses(addresses: Sequence[NetworkHostAndPort]) -> None:
    if not addresses:
        raise ValueConstraintError.single(
            "bridgeInnerConfig.floatAddresses", "floatAddresses must not be empty"
        )
    check_no_unspecified_addresses(addresses, "floatAddresses")


def check_proxy(proxy: Mapping[str, Any]) -> None:
    """Validate credential and timeout combinations for one proxy section."""

    version: ProxyVersion = proxy["version"]
    password = proxy.get("password")
    if password is not None and version is ProxyVersion.SOCKS4:
        raise ValueConstraintError.single(
            "outboundConfig.proxyConfig.password",
            "SOCKS4 proxies only support a userName; proxyConfig.password must not be set",
        )
    timeout = proxy.get("proxyTimeoutMS")
    if timeout is not None and timeout <= 0:
        raise ValueConstraintError.single(
            "outboundConfig.proxyConfig.proxyTimeoutMS",
            f"proxyTimeoutMS must be a positive integer, got {timeout}",
        )


def reconcile_revocation(
    legacy_soft_fail: bool | None, mode: RevocationMode | None
) -> RevocationMode:
    """Pick the single effective revocation mode.

    The legacy flag maps true -> SOFT_FAIL and false -> HARD_FAIL. When both
    settings are present they must agree; with neither, checking soft-fails.
    """

    legacy_mode: RevocationMode | None = None
    if legacy_soft_fail is not None:
        legacy_mode = RevocationMode.SOFT_FAIL if legacy_soft_fail else RevocationMode.HARD_FAIL

    if mode is None:
        return legacy_mode if legacy_mode is not None else RevocationMode.SOFT_FAIL
    if legacy_mode is not None and legacy_mode is not mode:
        flag = "true" if legacy_soft_fail else "false"
        raise ValueConstraintError.single(
            "revocationConfig.mode",
            f"crlCheckSoftFail = {flag} conflicts with revocationConfig.mode = {mode.value}; "
            "remove crlCheckSoftFail",
        )
    return mode


def resolve_audit(section: Mapping[str, Any] | None) -> AuditServiceConfiguration:
    if section is None:
        return AuditServiceConfiguration(logging_interval_sec=DEFAULT_AUDIT_LOGGING_INTERVAL_SEC)
    interval: int = section["loggingIntervalSec"]
    if interval <= 0:
        raise ValueConstraintError.single(
            "auditServiceConfiguration.loggingIntervalSec",
            f"loggingIntervalSec must be a positive integer, got {interval}",
        )
    return AuditServiceConfiguration(logging_interval_sec=interval)


def check_crypto_service(key: str, section: Mapping[str, Any]) -> None:
    name: SupportedCryptoService = section["name"]
    if name is not SupportedCryptoService.BC_SIMPLE and section.get("conf") is None:
        raise StructuralViolationError.single(
            f"{key}.conf", f"{key}.conf is required for crypto service {name.value}"
        )


__all__ = [
    "check_crypto_service",
    "check_float_addresses",
    "check_no_unspecified_addresses",
    "check_proxy",
    "reconcile_revocation",
    "resolve_audit",
    "resolve_entry_password",
]
