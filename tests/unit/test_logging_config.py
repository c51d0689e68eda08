"""
Unit tests for service logging setup.
"""

import io
import logging

import pytest

from image_bot.logging_config import configure_logging, parse_log_level


@pytest.mark.unit
class TestParseLogLevel:
    @pytest.mark.parametrize(
        "name,level",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warn", logging.WARNING),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("DEBUG", logging.DEBUG),
            (" error ", logging.ERROR),
        ],
    )
    def test_known_levels(self, name, level):
        assert parse_log_level(name) == level

    @pytest.mark.parametrize("name", [None, "", "verbose", "trace"])
    def test_unknown_defaults_to_info(self, name):
        assert parse_log_level(name) == logging.INFO


@pytest.mark.unit
class TestConfigureLogging:
    def test_returns_service_logger(self):
        service_logger = configure_logging("debug", handler=logging.StreamHandler(io.StringIO()))

        assert service_logger.name == "image_bot"
        assert service_logger.level == logging.DEBUG

    def test_child_loggers_use_format(self):
        stream = io.StringIO()
        service_logger = configure_logging("info", handler=logging.StreamHandler(stream))

        service_logger.getChild("index").info("Loaded image category: cats")
        service_logger.getChild("index").debug("hidden")

        output = stream.getvalue()
        assert "INFO - image_bot.index: Loaded image category: cats" in output
        assert "hidden" not in output

    def test_reconfigure_replaces_handler(self):
        configure_logging("info", handler=logging.StreamHandler(io.StringIO()))
        service_logger = configure_logging(
            "error", handler=logging.StreamHandler(io.StringIO())
        )

        assert len(service_logger.handlers) == 1
        assert service_logger.level == logging.ERROR
