"""
firewall-config — resolved configuration model.

File: src/firewall_config/config/model.py
Last updated: 2026-10-19

Purpose
- Immutable value types produced by the configuration pipeline.

What should be included in this file
- Enumerations for firewall mode, proxy version, revocation mode and crypto
  service providers.
- Address and X.500 subject value types with strict parsers.
- Frozen dataclasses for every configuration section and the root aggregate.
- Rendering back into the document key space (``to_document``).

Non-functional requirements
- All values are hashable/comparable by value; nothing mutates after
  construction.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Final


class FirewallMode(str, Enum):
    SENDER_RECEIVER = "SenderReceiver"
    BRIDGE_INNER = "BridgeInner"
    FLOAT_OUTER = "FloatOuter"


class ProxyVersion(str, Enum):
    SOCKS4 = "SOCKS4"
    SOCKS5 = "SOCKS5"
    HTTP = "HTTP"


class RevocationMode(str, Enum):
    OFF = "OFF"
    SOFT_FAIL = "SOFT_FAIL"
    HARD_FAIL = "HARD_FAIL"
    EXTERNAL_SOURCE = "EXTERNAL_SOURCE"


class SupportedCryptoService(str, Enum):
    """Key-management providers the runtime knows how to drive."""

    BC_SIMPLE = "BC_SIMPLE"
    UTIMACO = "UTIMACO"
    GEMALTO_LUNA = "GEMALTO_LUNA"
    FUTUREX = "FUTUREX"
    AZURE_KEY_VAULT = "AZURE_KEY_VAULT"
    PRIMUS_X = "PRIMUS_X"
    AWS_CLOUD = "AWS_CLOUD"


_HOST_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?$")


@dataclass(frozen=True, slots=True)
class NetworkHostAndPort:
    """A ``host:port`` pair as written in the configuration document."""

    host: str
    port: int

    @classmethod
    def parse(cls, text: str) -> NetworkHostAndPort:
        raw = text.strip()
        if raw.startswith("["):
            closing = raw.find("]")
            if closing < 0 or raw[closing + 1 : closing + 2] != ":":
                raise ValueError(f"invalid host:port {text!r}")
            host = raw[1:closing]
            port_text = raw[closing + 2 :]
            try:
                ipaddress.IPv6Address(host)
            except ValueError as exc:
                raise ValueError(f"invalid IPv6 host in {text!r}") from exc
        else:
            host, sep, port_text = raw.rpartition(":")
            if not sep or not host:
                raise ValueError(f"expected host:port, got {text!r}")
            if not _HOST_PATTERN.fullmatch(host):
                raise ValueError(f"invalid host in {text!r}")
        if not port_text.isdigit():
            raise ValueError(f"invalid port in {text!r}")
        port = int(port_text)
        if port > 65535:
            raise ValueError(f"port out of range in {text!r}")
        return cls(host=host, port=port)

    @property
    def is_unspecified(self) -> bool:
        """True for the wildcard bind address (``0.0.0.0`` or ``::``)."""
        try:
            return ipaddress.ip_address(self.host).is_unspecified
        except ValueError:
            return False

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


_DN_ATTRIBUTE_ORDER: Final[tuple[str, ...]] = ("CN", "OU", "O", "L", "ST", "C")
_DN_REQUIRED: Final[frozenset[str]] = frozenset({"O", "L", "C"})


@dataclass(frozen=True, slots=True)
class DistinguishedName:
    """X.500 subject expected on the peer's TLS certificate."""

    organisation: str
    locality: str
    country: str
    common_name: str | None = None
    organisation_unit: str | None = None
    state: str | None = None

    @classmethod
    def parse(cls, text: str) -> DistinguishedName:
        attributes: dict[str, str] = {}
        for part in text.split(","):
            name, sep, value = part.partition("=")
            name = name.strip().upper()
            value = value.strip()
            if not sep or not value:
                raise ValueError(f"malformed attribute {part.strip()!r} in {text!r}")
            if name not in _DN_ATTRIBUTE_ORDER:
                raise ValueError(f"unsupported attribute {name!r} in {text!r}")
            if name in attributes:
                raise ValueError(f"duplicate attribute {name!r} in {text!r}")
            attributes[name] = value
        missing = sorted(_DN_REQUIRED - attributes.keys())
        if missing:
            raise ValueError(f"missing required attributes {', '.join(missing)} in {text!r}")
        country = attributes["C"]
        if len(country) != 2 or not country.isalpha():
            raise ValueError(f"country must be a two-letter code in {text!r}")
        return cls(
            organisation=attributes["O"],
            locality=attributes["L"],
            country=country.upper(),
            common_name=attributes.get("CN"),
            organisation_unit=attributes.get("OU"),
            state=attributes.get("ST"),
        )

    def __str__(self) -> str:
        values = {
            "CN": self.common_name,
            "OU": self.organisation_unit,
            "O": self.organisation,
            "L": self.locality,
            "ST": self.state,
            "C": self.country,
        }
        return ", ".join(f"{key}={values[key]}" for key in _DN_ATTRIBUTE_ORDER if values[key])


@dataclass(frozen=True, slots=True)
class KeyStoreConfig:
    path: Path
    store_password: str
    entry_password: str


@dataclass(frozen=True, slots=True)
class TrustStoreConfig:
    path: Path
    store_password: str


@dataclass(frozen=True, slots=True)
class SSLConfiguration:
    key_store: KeyStoreConfig
    trust_store: TrustStoreConfig

    def to_document(self) -> dict[str, Any]:
        return {
            "sslKeystore": self.key_store.path.as_posix(),
            "keyStorePassword": self.key_store.store_password,
            "keyStorePrivateKeyPassword": self.key_store.entry_password,
            "trustStoreFile": self.trust_store.path.as_posix(),
            "trustStorePassword": self.trust_store.store_password,
        }


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    version: ProxyVersion
    proxy_address: NetworkHostAndPort
    user_name: str | None = None
    password: str | None = None
    proxy_timeout_ms: int | None = None

    def to_document(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "version": self.version.value,
            "proxyAddress": str(self.proxy_address),
        }
        if self.user_name is not None:
            out["userName"] = self.user_name
        if self.password is not None:
            out["password"] = self.password
        if self.proxy_timeout_ms is not None:
            out["proxyTimeoutMS"] = self.proxy_timeout_ms
        return out


@dataclass(frozen=True, slots=True)
class OutboundConfig:
    artemis_broker_address: NetworkHostAndPort
    artemis_ssl_configuration: SSLConfiguration | None = None
    proxy_config: ProxyConfig | None = None

    def to_document(self) -> dict[str, Any]:
        out: dict[str, Any] = {"artemisBrokerAddress": str(self.artemis_broker_address)}
        if self.artemis_ssl_configuration is not None:
            out["artemisSSLConfiguration"] = self.artemis_ssl_configuration.to_document()
        if self.proxy_config is not None:
            out["proxyConfig"] = self.proxy_config.to_document()
        return out


@dataclass(frozen=True, slots=True)
class InboundConfig:
    listening_address: NetworkHostAndPort

    def to_document(self) -> dict[str, Any]:
        return {"listeningAddress": str(self.listening_address)}


@dataclass(frozen=True, slots=True)
class BridgeInnerConfig:
    float_addresses: tuple[NetworkHostAndPort, ...]
    expected_certificate_subject: DistinguishedName
    tunnel_ssl_configuration: SSLConfiguration | None = None

    def to_document(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "floatAddresses": [str(item) for item in self.float_addresses],
            "expectedCertificateSubject": str(self.expected_certificate_subject),
        }
        if self.tunnel_ssl_configuration is not None:
            out["tunnelSSLConfiguration"] = self.tunnel_ssl_configuration.to_document()
        return out


@dataclass(frozen=True, slots=True)
class FloatOuterConfig:
    float_address: NetworkHostAndPort
    expected_certificate_subject: DistinguishedName
    tunnel_ssl_configuration: SSLConfiguration | None = None

    def to_document(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "floatAddress": str(self.float_address),
            "expectedCertificateSubject": str(self.expected_certificate_subject),
        }
        if self.tunnel_ssl_configuration is not None:
            out["tunnelSSLConfiguration"] = self.tunnel_ssl_configuration.to_document()
        return out


@dataclass(frozen=True, slots=True)
class RevocationConfig:
    mode: RevocationMode


@dataclass(frozen=True, slots=True)
class CryptoServiceConfig:
    name: SupportedCryptoService
    conf: Path | None = None

    def to_document(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name.value}
        if self.conf is not None:
            out["conf"] = self.conf.as_posix()
        return out


@dataclass(frozen=True, slots=True)
class AuditServiceConfiguration:
    logging_interval_sec: int


@dataclass(frozen=True, slots=True)
class ResolvedConfiguration:
    """Root aggregate handed to the bridge runtime at start-up."""

    base_directory: Path
    firewall_mode: FirewallMode
    certificates_directory: Path
    public_ssl_configuration: SSLConfiguration
    audit_service_configuration: AuditServiceConfiguration
    revocation_config: RevocationConfig
    use_proxy_for_crls: bool = False
    outbound_config: OutboundConfig | None = None
    inbound_config: InboundConfig | None = None
    bridge_inner_config: BridgeInnerConfig | None = None
    float_outer_config: FloatOuterConfig | None = None
    health_check_phrase: str | None = None
    p2p_tls_signing_crypto_service_config: CryptoServiceConfig | None = None
    artemis_crypto_service_config: CryptoServiceConfig | None = None
    tunneling_crypto_service_config: CryptoServiceConfig | None = None
    network_parameters_path: Path | None = None

    @property
    def ssl_keystore(self) -> Path:
        return self.public_ssl_configuration.key_store.path

    @property
    def trust_store_file(self) -> Path:
        return self.public_ssl_configuration.trust_store.path

    def to_document(self) -> dict[str, Any]:
        """Render the resolved values back into document keys (secrets included)."""

        public = self.public_ssl_configuration.to_document()
        out: dict[str, Any] = {
            "baseDirectory": self.base_directory.as_posix(),
            "firewallMode": self.firewall_mode.value,
            "certificatesDirectory": self.certificates_directory.as_posix(),
            **public,
            "auditServiceConfiguration": {
                "loggingIntervalSec": self.audit_service_configuration.logging_interval_sec,
            },
            "revocationConfig": {"mode": self.revocation_config.mode.value},
            "useProxyForCrls": self.use_proxy_for_crls,
        }
        if self.outbound_config is not None:
            out["outboundConfig"] = self.outbound_config.to_document()
        if self.inbound_config is not None:
            out["inboundConfig"] = self.inbound_config.to_document()
        if self.bridge_inner_config is not None:
            out["bridgeInnerConfig"] = self.bridge_inner_config.to_document()
        if self.float_outer_config is not None:
            out["floatOuterConfig"] = self.float_outer_config.to_document()
        if self.health_check_phrase is not None:
            out["healthCheckPhrase"] = self.health_check_phrase
        for key, service in (
            ("p2pTlsSigningCryptoServiceConfig", self.p2p_tls_signing_crypto_service_config),
            ("artemisCryptoServiceConfig", self.artemis_crypto_service_config),
            ("tunnelingCryptoServiceConfig", self.tunneling_crypto_service_config),
        ):
            if service is not None:
                out[key] = service.to_document()
        if self.network_parameters_path is not None:
            out["networkParametersPath"] = self.network_parameters_path.as_posix()
        return out


__all__ = [
    "AuditServiceConfiguration",
    "BridgeInnerConfig",
    "CryptoServiceConfig",
    "DistinguishedName",
    "FirewallMode",
    "FloatOuterConfig",
    "InboundConfig",
    "KeyStoreConfig",
    "NetworkHostAndPort",
    "OutboundConfig",
    "ProxyConfig",
    "ProxyVersion",
    "ResolvedConfiguration",
    "RevocationConfig",
    "RevocationMode",
    "SSLConfiguration",
    "SupportedCryptoService",
    "TrustStoreConfig",
]
