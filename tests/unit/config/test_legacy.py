"""
firewall-config — unit tests for legacy dialect mapping

File: tests/unit/config/test_legacy.py
Last updated: 2026-10-19

Purpose
- Validate dialect detection, alias rewriting and soft-fail folding.

What this test file should cover
- Marker-key and ``configVersion`` based detection.
- Every alias in the v3 table, including nested SSL soft-fail flags.
- Idempotency on current documents and conflict handling.
- Legacy and current documents resolving to equal configurations.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from structlog.testing import capture_logs

from firewall_config.config.errors import TypeMismatchError, ValueConstraintError
from firewall_config.config.legacy import ConfigDialect, detect_dialect, normalize_document
from firewall_config.config.loader import resolve_document
from firewall_config.config.model import RevocationMode

_SSL = {
    "sslKeystore": "tunnel/bridge.jks",
    "keyStorePassword": "tunnelpass",
    "trustStoreFile": "tunnel/trust.jks",
    "trustStorePassword": "tunneltrust",
}


def _current_bridge() -> dict[str, object]:
    return {
        "firewallMode": "BridgeInner",
        "outboundConfig": {
            "artemisBrokerAddress": "nodeserver:11005",
            "proxyConfig": {
                "version": "SOCKS5",
                "proxyAddress": "proxy:1080",
                "userName": "user",
                "password": "proxypass",
            },
            "artemisSSLConfiguration": dict(_SSL),
        },
        "bridgeInnerConfig": {
            "floatAddresses": ["dmz:12005"],
            "expectedCertificateSubject": "O=Local Only, L=London, C=GB",
            "tunnelSSLConfiguration": dict(_SSL),
        },
        "revocationConfig": {"mode": "HARD_FAIL"},
    }


def _legacy_bridge() -> dict[str, object]:
    return {
        "configVersion": 3,
        "bridgeMode": "BridgeInner",
        "outboundConfig": {
            "artemisBrokerAddress": "nodeserver:11005",
            "socksProxyConfig": {
                "version": "SOCKS5",
                "proxyAddress": "proxy:1080",
                "userName": "user",
                "password": "proxypass",
            },
            "customSSLConfiguration": {**_SSL, "crlCheckSoftFail": False},
        },
        "bridgeInnerConfig": {
            "floatAddresses": ["dmz:12005"],
            "expectedCertificateSubject": "O=Local Only, L=London, C=GB",
            "customSSLConfiguration": dict(_SSL),
        },
    }


def test_detects_dialect_by_marker_keys_and_version() -> None:
    assert detect_dialect(_current_bridge()) is ConfigDialect.V4
    assert detect_dialect(_legacy_bridge()) is ConfigDialect.V3
    assert detect_dialect({"bridgeMode": "FloatOuter"}) is ConfigDialect.V3
    assert detect_dialect({"outboundConfig": {"socksProxyConfig": {}}}) is ConfigDialect.V3
    assert detect_dialect({"configVersion": 3}) is ConfigDialect.V3
    assert detect_dialect({"configVersion": 4}) is ConfigDialect.V4


@pytest.mark.parametrize(
    ("version", "expected"),
    [("3", ConfigDialect.V3), (" 2 ", ConfigDialect.V3), ("4", ConfigDialect.V4)],
)
def test_config_version_given_as_text_selects_dialect(
    version: str, expected: ConfigDialect
) -> None:
    assert detect_dialect({"configVersion": version}) is expected


def test_legacy_aliases_are_rewritten() -> None:
    normalized = normalize_document(_legacy_bridge())

    assert "bridgeMode" not in normalized
    assert "configVersion" not in normalized
    assert normalized["firewallMode"] == "BridgeInner"
    outbound = normalized["outboundConfig"]
    assert "socksProxyConfig" not in outbound
    assert outbound["proxyConfig"]["version"] == "SOCKS5"
    assert outbound["artemisSSLConfiguration"] == _SSL
    assert normalized["bridgeInnerConfig"]["tunnelSSLConfiguration"] == _SSL
    assert normalized["revocationConfig"] == {"mode": "HARD_FAIL"}


def test_float_custom_ssl_is_renamed() -> None:
    normalized = normalize_document(
        {"bridgeMode": "FloatOuter", "floatOuterConfig": {"customSSLConfiguration": dict(_SSL)}}
    )

    assert normalized["floatOuterConfig"] == {"tunnelSSLConfiguration": _SSL}


def test_normalize_is_idempotent_on_current_documents() -> None:
    document = _current_bridge()

    assert normalize_document(document) == document
    assert normalize_document(normalize_document(document)) == document


def test_each_rewrite_logs_deprecation() -> None:
    with capture_logs() as captured:
        normalize_document(_legacy_bridge())

    keys = {item["key"] for item in captured if item["event"] == "deprecated_config_key"}
    assert keys == {
        "bridgeMode",
        "outboundConfig.socksProxyConfig",
        "outboundConfig.customSSLConfiguration",
        "bridgeInnerConfig.customSSLConfiguration",
        "outboundConfig.artemisSSLConfiguration.crlCheckSoftFail",
        "crlCheckSoftFail",
    }


def test_old_and_new_key_with_equal_values_collapse() -> None:
    document = {"bridgeMode": "FloatOuter", "firewallMode": "FloatOuter"}

    assert normalize_document(document) == {"firewallMode": "FloatOuter"}


def test_old_and_new_key_with_different_values_fail() -> None:
    document = {"bridgeMode": "FloatOuter", "firewallMode": "BridgeInner"}

    with pytest.raises(ValueConstraintError, match="bridgeMode and firewallMode"):
        normalize_document(document)


@pytest.mark.parametrize(
    ("flag", "expected"),
    [(True, "SOFT_FAIL"), (False, "HARD_FAIL"), ("true", "SOFT_FAIL"), ("off", "HARD_FAIL")],
)
def test_soft_fail_flag_folds_into_revocation_mode(flag: object, expected: str) -> None:
    normalized = normalize_document({"crlCheckSoftFail": flag})

    assert normalized == {"revocationConfig": {"mode": expected}}


def test_soft_fail_flag_agreeing_with_mode_is_accepted() -> None:
    normalized = normalize_document(
        {"crlCheckSoftFail": False, "revocationConfig": {"mode": "HARD_FAIL"}}
    )

    assert normalized == {"revocationConfig": {"mode": "HARD_FAIL"}}


def test_soft_fail_flag_conflicting_with_mode_fails() -> None:
    document = {"crlCheckSoftFail": True, "revocationConfig": {"mode": "OFF"}}

    with pytest.raises(ValueConstraintError, match="conflicts with revocationConfig.mode = OFF"):
        normalize_document(document)


def test_non_boolean_soft_fail_flag_is_type_mismatch() -> None:
    with pytest.raises(TypeMismatchError, match="crlCheckSoftFail"):
        normalize_document({"crlCheckSoftFail": 7})


def test_legacy_and_current_documents_resolve_equal(tmp_path: Path) -> None:
    legacy = resolve_document(_legacy_bridge(), base_directory=tmp_path)
    current = resolve_document(_current_bridge(), base_directory=tmp_path)

    assert legacy == current
    assert legacy.revocation_config.mode is RevocationMode.HARD_FAIL


@settings(max_examples=40, deadline=None)
@given(
    soft_fail=st.booleans(),
    broker_port=st.integers(min_value=1, max_value=65535),
    float_hosts=st.lists(
        st.from_regex(r"[a-z][a-z0-9]{0,10}", fullmatch=True), min_size=1, max_size=3
    ),
)
def test_property_dialects_resolve_equal(
    soft_fail: bool, broker_port: int, float_hosts: list[str]
) -> None:
    base = Path("/srv/firewall")
    addresses = [f"{host}:12005" for host in float_hosts]
    subject = "O=Local Only, L=London, C=GB"
    legacy = {
        "bridgeMode": "BridgeInner",
        "crlCheckSoftFail": soft_fail,
        "outboundConfig": {"artemisBrokerAddress": f"nodeserver:{broker_port}"},
        "bridgeInnerConfig": {
            "floatAddresses": addresses,
            "expectedCertificateSubject": subject,
            "customSSLConfiguration": dict(_SSL),
        },
    }
    current = {
        "firewallMode": "BridgeInner",
        "revocationConfig": {"mode": "SOFT_FAIL" if soft_fail else "HARD_FAIL"},
        "outboundConfig": {"artemisBrokerAddress": f"nodeserver:{broker_port}"},
        "bridgeInnerConfig": {
            "floatAddresses": addresses,
            "expectedCertificateSubject": subject,
            "tunnelSSLConfiguration": dict(_SSL),
        },
    }

    assert resolve_document(legacy, base_directory=base) == resolve_document(
        current, base_directory=base
    )
