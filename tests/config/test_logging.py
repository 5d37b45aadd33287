"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from metamint.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("metamint")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("metamint").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("metamint").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("metamint.test")
        log.warning("publish.failed", code="MINT_ERROR")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "publish.failed"
        assert parsed["code"] == "MINT_ERROR"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "metamint.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("metamint.infrastructure.cache").debug("Cached snapshot metadata")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Cached snapshot metadata"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "metamint.infrastructure.cache"

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("web3.providers.HTTPProvider").debug("rpc noise")
        logging.getLogger("httpx").info("HTTP Request: POST")
        logging.getLogger("urllib3.connectionpool").debug("Starting new HTTP connection")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
