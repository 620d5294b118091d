"""
firewall-config — unit tests for observability logging

File: tests/unit/observability/test_logging.py
Last updated: 2026-10-19

Purpose
- Validate structlog configuration, JSON-lines output and redaction.

What this test file should cover
- JSON line validity and secret-key redaction guarantees.
- Level filtering and format selection.
- Pipeline log events never carry secret values.
"""

from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING

import pytest
import structlog
from structlog.testing import capture_logs

from firewall_config.config.loader import resolve_document
from firewall_config.constants import REDACTED_VALUE
from firewall_config.observability.logging import configure_logging, redact_event

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def _read_json_lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_json_output_is_one_object_per_line() -> None:
    stream = io.StringIO()
    configure_logging("INFO", "json", stream=stream)

    logger = structlog.get_logger("firewall_config.tests")
    logger.info("first_event", mode="BridgeInner")
    logger.warning("second_event", count=2)

    events = _read_json_lines(stream)
    assert [item["event"] for item in events] == ["first_event", "second_event"]
    assert events[0]["level"] == "info"
    assert events[0]["mode"] == "BridgeInner"
    assert events[1]["level"] == "warning"
    assert "timestamp" in events[0]


def test_secret_keys_and_assignments_are_redacted() -> None:
    stream = io.StringIO()
    configure_logging("DEBUG", "json", stream=stream)

    structlog.get_logger("firewall_config.tests").info(
        "connect",
        keyStorePassword="s3cret-store",
        proxy={"userName": "alice", "password": "pa55word"},
        detail="retrying with password=hunter22 after timeout",
    )

    text = stream.getvalue()
    assert "s3cret-store" not in text
    assert "pa55word" not in text
    assert "hunter22" not in text

    event = _read_json_lines(stream)[0]
    assert event["keyStorePassword"] == REDACTED_VALUE
    assert event["proxy"] == {"userName": "alice", "password": REDACTED_VALUE}
    assert event["detail"] == f"retrying with password={REDACTED_VALUE} after timeout"


def test_level_filter_drops_lower_levels() -> None:
    stream = io.StringIO()
    configure_logging("WARNING", "json", stream=stream)

    logger = structlog.get_logger("firewall_config.tests")
    logger.info("dropped")
    logger.error("kept")

    assert [item["event"] for item in _read_json_lines(stream)] == ["kept"]


def test_console_format_renders_event_name() -> None:
    stream = io.StringIO()
    configure_logging("INFO", "console", stream=stream)

    structlog.get_logger("firewall_config.tests").info("console_event", trustStorePassword="abc")

    text = stream.getvalue()
    assert "console_event" in text
    assert REDACTED_VALUE in text


def test_unsupported_format_and_level_are_rejected() -> None:
    with pytest.raises(ValueError, match="unsupported log format"):
        configure_logging("INFO", "xml")
    with pytest.raises(ValueError, match="unsupported logging level"):
        configure_logging("LOUD", "json")


def test_redact_event_keeps_non_secret_fields() -> None:
    event = redact_event(None, "info", {"event": "x", "mode": "FloatOuter", "token": None})

    assert event == {"event": "x", "mode": "FloatOuter", "token": None}


def test_loaded_event_carries_only_redacted_rendering(tmp_path: Path) -> None:
    document = {
        "firewallMode": "SenderReceiver",
        "keyStorePassword": "store-secret-value",
        "trustStorePassword": "trust-secret-value",
        "outboundConfig": {"artemisBrokerAddress": "localhost:11005"},
        "inboundConfig": {"listeningAddress": "0.0.0.0:10005"},
    }

    with capture_logs() as captured:
        resolve_document(document, base_directory=tmp_path)

    loaded = [item for item in captured if item["event"] == "firewall_config_loaded"]
    assert len(loaded) == 1
    assert loaded[0]["mode"] == "SenderReceiver"
    assert loaded[0]["dialect"] == "v4"
    rendered = loaded[0]["config"]
    assert "store-secret-value" not in rendered
    assert "trust-secret-value" not in rendered
