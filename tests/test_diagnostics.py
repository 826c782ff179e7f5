"""Tests for the diagnostic sink and logging setup."""

import json
import logging

import pytest

from kvasir.diagnostics import (
    LOG_ENV_VAR,
    Diagnostic,
    DiagnosticSink,
    configure_logging,
    resolve_log_level,
)


@pytest.fixture(autouse=True)
def _restore_kvasir_logger():
    logger = logging.getLogger("kvasir")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    logger.handlers[:] = []
    logger.propagate = True
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestDiagnosticSink:
    def test_records_and_logs(self, caplog):
        sink = DiagnosticSink()
        with caplog.at_level(logging.WARNING, logger="kvasir"):
            sink.warn("parse", "failed parsing with json (bad)", path="a.json")

        assert sink.records == [Diagnostic("parse", "failed parsing with json (bad)", "a.json")]
        assert "[parse] a.json: failed parsing with json (bad)" in caplog.text

    def test_for_stage(self):
        sink = DiagnosticSink(logging.getLogger("kvasir.test"))
        sink.warn("discovery", "bad glob")
        sink.warn("write", "conflict", path="out/a.md")
        assert [r.message for r in sink.for_stage("write")] == ["conflict"]
        assert len(sink) == 2

    def test_info_and_debug_not_recorded(self):
        sink = DiagnosticSink()
        sink.info("%d parsers succeeded.", 3)
        sink.debug("detail")
        assert len(sink) == 0

    def test_str_without_path(self):
        assert str(Diagnostic("template", "pick one")) == "[template] pick one"


class TestResolveLogLevel:
    def test_debug_flag_wins(self, monkeypatch):
        monkeypatch.setenv(LOG_ENV_VAR, "error")
        assert resolve_log_level(debug=True, configured="warn") == logging.DEBUG

    def test_env_beats_config(self, monkeypatch):
        monkeypatch.setenv(LOG_ENV_VAR, "INFO")
        assert resolve_log_level(configured="error") == logging.INFO

    def test_unknown_env_ignored(self, monkeypatch):
        monkeypatch.setenv(LOG_ENV_VAR, "chatty")
        assert resolve_log_level(configured="error") == logging.ERROR

    def test_default_is_warning(self, monkeypatch):
        monkeypatch.delenv(LOG_ENV_VAR, raising=False)
        assert resolve_log_level() == logging.WARNING


class TestConfigureLogging:
    def test_replaces_handlers(self):
        configure_logging(logging.INFO)
        logger = configure_logging(logging.DEBUG)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_json_format(self, capsys):
        logger = configure_logging(logging.WARNING, fmt="json")
        logging.getLogger("kvasir.parsers").warning("hello %s", "there")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert json.loads(line) == {
            "level": "warning",
            "logger": "kvasir.parsers",
            "message": "hello there",
        }
        assert logger.name == "kvasir"
