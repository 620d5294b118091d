"""
firewall-config — configuration pipeline entry point.

File: src/firewall_config/config/loader.py
Last updated: 2026-10-19

Purpose
- Run read -> alias-map -> strict-validate -> mode-resolve -> path-resolve ->
  cross-validate and assemble the immutable ``ResolvedConfiguration``.

What should be included in this file
- ``load_config``: the one-shot load used at process start.
- ``resolve_document``: the same pipeline for an already-read mapping.
- Structured log events for successful and rejected loads.

Functional requirements
- Every failure propagates as a ``ConfigError`` subclass; no partial results.
- Log events carry only the redacted rendering.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from firewall_config.config.errors import ConfigError
from firewall_config.config.legacy import detect_dialect, normalize_document
from firewall_config.config.model import (
    BridgeInnerConfig,
    CryptoServiceConfig,
    FirewallMode,
    FloatOuterConfig,
    InboundConfig,
    KeyStoreConfig,
    OutboundConfig,
    ProxyConfig,
    ResolvedConfiguration,
    RevocationConfig,
    SSLConfiguration,
    TrustStoreConfig,
)
from firewall_config.config.modes import resolve_mode
from firewall_config.config.paths import PathResolver
from firewall_config.config.redaction import render_redacted
from firewall_config.config.rules import (
    check_crypto_service,
    check_float_addresses,
    check_no_unspecified_addresses,
    check_proxy,
    reconcile_revocation,
    resolve_audit,
    resolve_entry_password,
)
from firewall_config.config.schema import validate_document
from firewall_config.config.sources import default_document, merge_documents, read_layers

_log = structlog.get_logger(__name__)

_CRYPTO_SERVICE_KEYS: tuple[str, ...] = (
    "p2pTlsSigningCryptoServiceConfig",
    "artemisCryptoServiceConfig",
    "tunnelingCryptoServiceConfig",
)


def load_config(
    base_directory: str | Path,
    config_path: str | Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> ResolvedConfiguration:
    """Load and resolve the firewall configuration at ``config_path``."""

    env_map = dict(os.environ if environ is None else environ)
    try:
        merged = read_layers(config_path, environ=env_map)
        config = resolve_document(merged, base_directory=base_directory)
    except ConfigError as exc:
        _log.warning(
            "config_rejected",
            config_path=str(config_path),
            kind=exc.kind.value,
            paths=list(exc.paths),
        )
        raise
    return config


def resolve_document(
    document: Mapping[str, object],
    *,
    base_directory: str | Path,
) -> ResolvedConfiguration:
    """Resolve an already-read document; the defaults layer is applied underneath."""

    dialect = detect_dialect(document)
    normalized = normalize_document(merge_documents(default_document(), document))
    validated = validate_document(normalized)
    mode = resolve_mode(validated)

    paths = PathResolver(base_directory, validated.get("certificatesDirectory"))
    config = _assemble(validated, mode, paths)

    _log.info(
        "firewall_config_loaded",
        mode=mode.value,
        dialect=dialect.value,
        config=render_redacted(config),
    )
    return config


def _assemble(
    validated: Mapping[str, Any], mode: FirewallMode, paths: PathResolver
) -> ResolvedConfiguration:
    public_ssl = _ssl_configuration(validated, paths)

    outbound = None
    if validated.get("outboundConfig") is not None:
        outbound = _outbound(validated["outboundConfig"], paths)

    inbound = None
    if validated.get("inboundConfig") is not None:
        inbound = InboundConfig(listening_address=validated["inboundConfig"]["listeningAddress"])

    bridge_inner = None
    if validated.get("bridgeInnerConfig") is not None:
        bridge_inner = _bridge_inner(validated["bridgeInnerConfig"], paths)

    float_outer = None
    if validated.get("floatOuterConfig") is not None:
        float_outer = _float_outer(validated["floatOuterConfig"], paths)

    revocation_section = validated.get("revocationConfig")
    revocation_mode = reconcile_revocation(
        None, revocation_section["mode"] if revocation_section is not None else None
    )

    crypto: dict[str, CryptoServiceConfig | None] = {}
    for key in _CRYPTO_SERVICE_KEYS:
        section = validated.get(key)
        if section is None:
            crypto[key] = None
            continue
        check_crypto_service(key, section)
        crypto[key] = CryptoServiceConfig(
            name=section["name"], conf=paths.resolve_optional(section.get("conf"))
        )

    return ResolvedConfiguration(
        base_directory=paths.base_directory,
        firewall_mode=mode,
        certificates_directory=paths.certificates_directory,
        public_ssl_configuration=public_ssl,
        audit_service_configuration=resolve_audit(validated.get("auditServiceConfiguration")),
        revocation_config=RevocationConfig(mode=revocation_mode),
        use_proxy_for_crls=validated.get("useProxyForCrls", False),
        outbound_config=outbound,
        inbound_config=inbound,
        bridge_inner_config=bridge_inner,
        float_outer_config=float_outer,
        health_check_phrase=validated.get("healthCheckPhrase"),
        p2p_tls_signing_crypto_service_config=crypto["p2pTlsSigningCryptoServiceConfig"],
        artemis_crypto_service_config=crypto["artemisCryptoServiceConfig"],
        tunneling_crypto_service_config=crypto["tunnelingCryptoServiceConfig"],
        network_parameters_path=paths.resolve_optional(validated.get("networkParametersPath")),
    )


def _ssl_configuration(section: Mapping[str, Any], paths: PathResolver) -> SSLConfiguration:
    store_password: str = section["keyStorePassword"]
    return SSLConfiguration(
        key_store=KeyStoreConfig(
            path=paths.keystore(section),
            store_password=store_password,
            entry_password=resolve_entry_password(
                store_password, section.get("keyStorePrivateKeyPassword")
            ),
        ),
        trust_store=TrustStoreConfig(
            path=paths.truststore(section),
            store_password=section["trustStorePassword"],
        ),
    )


def _optional_ssl(
    section: Mapping[str, Any] | None, paths: PathResolver
) -> SSLConfiguration | None:
    if section is None:
        return None
    return _ssl_configuration(section, paths)


def _outbound(section: Mapping[str, Any], paths: PathResolver) -> OutboundConfig:
    proxy = None
    proxy_section = section.get("proxyConfig")
    if proxy_section is not None:
        check_proxy(proxy_section)
        proxy = ProxyConfig(
            version=proxy_section["version"],
            proxy_address=proxy_section["proxyAddress"],
            user_name=proxy_section.get("userName"),
            password=proxy_section.get("password"),
            proxy_timeout_ms=proxy_section.get("proxyTimeoutMS"),
        )
    return OutboundConfig(
        artemis_broker_address=section["artemisBrokerAddress"],
        artemis_ssl_configuration=_optional_ssl(section.get("artemisSSLConfiguration"), paths),
        proxy_config=proxy,
    )


def _bridge_inner(section: Mapping[str, Any], paths: PathResolver) -> BridgeInnerConfig:
    addresses = section["floatAddresses"]
    check_float_addresses(addresses)
    return BridgeInnerConfig(
        float_addresses=tuple(addresses),
        expected_certificate_subject=section["expectedCertificateSubject"],
        tunnel_ssl_configuration=_optional_ssl(section.get("tunnelSSLConfiguration"), paths),
    )


def _float_outer(section: Mapping[str, Any], paths: PathResolver) -> FloatOuterConfig:
    address = section["floatAddress"]
    check_no_unspecified_addresses((address,), "floatAddress")
    return FloatOuterConfig(
        float_address=address,
        expected_certificate_subject=section["expectedCertificateSubject"],
        tunnel_ssl_configuration=_optional_ssl(section.get("tunnelSSLConfiguration"), paths),
    )


__all__ = ["load_config", "resolve_document"]
