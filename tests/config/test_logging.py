"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from refinekit import guards
from refinekit.config.logging import build_formatter, configure_logging
from refinekit.config.settings import RefinekitSettings
from refinekit.guards import regex_match


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state and forget compiled regexes around each test."""
    guards._compiler.cache_clear()
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    lib = logging.getLogger("refinekit")
    lib_level = lib.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    lib.setLevel(lib_level)
    guards._compiler.cache_clear()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("refinekit").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("refinekit").level == logging.WARNING

    def test_flags_default_to_settings(self) -> None:
        configure_logging(settings=RefinekitSettings(verbose=True))
        assert logging.getLogger("refinekit").level == logging.DEBUG

    def test_explicit_flag_beats_settings(self) -> None:
        configure_logging(verbose=False, settings=RefinekitSettings(verbose=True))
        assert logging.getLogger("refinekit").level == logging.WARNING

    def test_flags_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REFINEKIT_VERBOSE", "true")
        configure_logging()
        assert logging.getLogger("refinekit").level == logging.DEBUG

    def test_human_mode_output(self) -> None:
        configure_logging(verbose=True, log_json=False)
        log = structlog.get_logger("refinekit.test")
        log.warning("hello world", key="val")
        # Smoke test; format depends on terminal

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("refinekit.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "refinekit.test"
        assert "timestamp" in parsed

    def test_library_debug_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        regex_match("(unclosed", "text")

        captured = capfd.readouterr()
        lines = [json.loads(line) for line in captured.err.strip().splitlines()]
        assert any(
            line["logger"] == "refinekit.guards" and line["level"] == "debug" for line in lines
        )

    def test_invalid_pattern_logged_again_after_cache_clear(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        regex_match("(seen before", "text")
        guards._compiler.cache_clear()
        configure_logging(verbose=True, log_json=True)

        regex_match("(seen before", "text")

        captured = capfd.readouterr()
        assert "(seen before" in captured.err

    def test_library_debug_hidden_when_quiet(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)

        regex_match("(still unclosed", "text")

        captured = capfd.readouterr()
        assert captured.err == ""

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("pydantic").debug("validation noise")

        captured = capfd.readouterr()
        assert captured.err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1

    def test_custom_stream(self) -> None:
        buffer = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buffer)

        logging.getLogger("refinekit.enums").warning("routed")

        parsed = json.loads(buffer.getvalue().strip())
        assert parsed["event"] == "routed"
        assert parsed["logger"] == "refinekit.enums"


class TestBuildFormatter:
    def test_json_formatter_on_own_handler(self) -> None:
        buffer = io.StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(build_formatter(log_json=True))
        logger = logging.getLogger("refinekit.test.formatter")
        logger.addHandler(handler)
        logger.propagate = False
        try:
            logger.warning("formatted %s", "here")
        finally:
            logger.removeHandler(handler)
            logger.propagate = True

        parsed = json.loads(buffer.getvalue().strip())
        assert parsed["event"] == "formatted here"
        assert parsed["level"] == "warning"

    def test_console_formatter_renders_event(self) -> None:
        record = logging.LogRecord("refinekit.x", logging.WARNING, __file__, 1, "plain", None, None)
        assert "plain" in build_formatter(log_json=False).format(record)
