"""Tests for logging configuration."""

import logging

from edgeflow.core.logging import (
    LogComponent,
    LogLevel,
    PrettyFormatter,
    PRETTY_FORMAT,
    configure_logging,
    get_logger,
    log_state,
)


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_component_levels(self):
        configure_logging(
            default_level=LogLevel.WARNING,
            component_levels={LogComponent.ENGINE: LogLevel.DEBUG},
        )
        assert logging.getLogger().level == logging.WARNING
        assert get_logger(LogComponent.ENGINE).level == logging.DEBUG

    def test_defaults_apply_to_every_component(self):
        configure_logging(default_level=LogLevel.ERROR, pretty=False)
        for component in LogComponent:
            assert get_logger(component).level == logging.ERROR

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "edgeflow.log"
        configure_logging(default_level=LogLevel.INFO, log_file=str(log_file))
        get_logger(LogComponent.ENGINE).info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()


class TestHelpers:
    """Test suite for logging helpers."""

    def test_get_logger_name(self):
        assert get_logger(LogComponent.NODES).name == "edgeflow.nodes"

    def test_pretty_formatter(self):
        record = logging.LogRecord(
            "edgeflow.engine", logging.ERROR, __file__, 1, "failed", None, None
        )
        output = PrettyFormatter(PRETTY_FORMAT).format(record)
        assert "failed" in output
        assert "ERROR" in output

    def test_log_state(self, caplog):
        logger = get_logger(LogComponent.CONTEXT)
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_state(logger, {"x": 1, "nested": {"y": 2}})
        messages = [record.getMessage() for record in caplog.records]
        assert "x: 1" in messages
        assert "nested:" in messages
        assert "  y: 2" in messages

    def test_returns_settings(self):
        settings = configure_logging(
            default_level=LogLevel.INFO,
            component_levels={LogComponent.CLI: LogLevel.ERROR},
            pretty=False,
        )
        assert settings.level_for(LogComponent.CLI) == LogLevel.ERROR
        assert settings.level_for(LogComponent.ENGINE) == LogLevel.INFO
        assert len(logging.getLogger().handlers) == 1
