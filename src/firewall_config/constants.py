"""Stable constants shared across the configuration pipeline."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Highest configuration format version understood by this engine.
CONFIG_FORMAT_VERSION: Final[int] = 4
LEGACY_CONFIG_FORMAT_VERSION: Final[int] = 3

ENV_PREFIX: Final[str] = "FIREWALL_"

# Default certificate layout (relative to the base directory).
CERTIFICATES_DIR: Final[PurePosixPath] = PurePosixPath("certificates")
DEFAULT_SSL_KEYSTORE_NAME: Final[str] = "sslkeystore.jks"
DEFAULT_TRUSTSTORE_NAME: Final[str] = "truststore.jks"

# Development store passwords applied by the defaults layer.
DEFAULT_KEYSTORE_PASSWORD: Final[str] = "cordacadevpass"
DEFAULT_TRUSTSTORE_PASSWORD: Final[str] = "trustpass"

DEFAULT_AUDIT_LOGGING_INTERVAL_SEC: Final[int] = 60

REDACTED_VALUE: Final[str] = "***REDACTED***"

__all__ = [
    "CERTIFICATES_DIR",
    "CONFIG_FORMAT_VERSION",
    "DEFAULT_AUDIT_LOGGING_INTERVAL_SEC",
    "DEFAULT_KEYSTORE_PASSWORD",
    "DEFAULT_SSL_KEYSTORE_NAME",
    "DEFAULT_TRUSTSTORE_NAME",
    "DEFAULT_TRUSTSTORE_PASSWORD",
    "ENV_PREFIX",
    "LEGACY_CONFIG_FORMAT_VERSION",
    "REDACTED_VALUE",
]
