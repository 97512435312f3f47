"""Tests for declassify.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from declassify.logging import configure_logging, get_logger, log_diagnostic
from declassify.models import Diagnostic, Severity


def test_get_logger_nests_under_package_logger() -> None:
    assert get_logger("extractor").name == "declassify.extractor"
    assert get_logger().name == "declassify"


def test_log_diagnostic_maps_severity_to_level(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.diagnostics")
    with caplog.at_level(logging.DEBUG, logger="tests.diagnostics"):
        log_diagnostic(logger, Diagnostic("dropped-comment", "Comment dropped", Severity.INFO, line=3), "a.ts")
        log_diagnostic(logger, Diagnostic("duplicate-key", "Two 'methods' entries"))
        log_diagnostic(logger, Diagnostic("malformed-component-config", "Bad config", Severity.ERROR))

    assert [record.levelno for record in caplog.records] == [logging.DEBUG, logging.WARNING, logging.ERROR]
    assert caplog.records[0].getMessage() == "a.ts: line 3: Comment dropped [dropped-comment]"
    assert [record.diagnostic_code for record in caplog.records] == [
        "dropped-comment",
        "duplicate-key",
        "malformed-component-config",
    ]


def test_configure_logging_replaces_previous_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "declassify.log"
    logger = configure_logging(verbose=True, log_file=log_file)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logger = configure_logging()
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
