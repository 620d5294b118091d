"""Public observability primitives: structlog setup and event redaction."""

from firewall_config.observability.logging import LOG_FORMATS, configure_logging, redact_event

__all__ = ["LOG_FORMATS", "configure_logging", "redact_event"]
