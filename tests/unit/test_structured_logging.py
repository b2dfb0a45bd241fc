"""Unit tests for the structured session logger."""

import logging

import pytest

from docwriter.app.utils.logging import StructuredSessionLogger


def test_transition_logged_at_info(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="docwriter.app.utils.logging"):
        StructuredSessionLogger().log_transition("initializing", "local")

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert record.getMessage() == "Session mode initializing -> local"
    assert record.structured == {"event": "mode_transition", "from": "initializing", "to": "local"}


def test_persistence_failure_logged_at_error(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="docwriter.app.utils.logging"):
        StructuredSessionLogger().log_persistence_failure("remote", "save", "connection reset")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.structured["backend"] == "remote"
    assert record.structured["cause"] == "connection reset"


def test_generation_failure_logged_with_reason(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="docwriter.app.utils.logging"):
        StructuredSessionLogger().log_generation(
            "abc", "request-failed", 12.3456, error_reason="TimeoutError"
        )

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.structured["latency_ms"] == 12.35
    assert record.structured["error_reason"] == "TimeoutError"


def test_generation_success_omits_reason(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="docwriter.app.utils.logging"):
        StructuredSessionLogger().log_generation("abc", "success", 5.0)

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert "error_reason" not in record.structured
