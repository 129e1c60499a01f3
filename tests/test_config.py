"""Tests for environment configuration."""

import logging
from pathlib import Path

from ts_analyzer.config import LOG_FORMAT, configure_logging, get_env_config


def test_env_config_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "TS_ANALYZER_FILE_GLOB", "TS_ANALYZER_FN_TYPES", "TS_ANALYZER_LANGUAGES_CONFIG"):
        monkeypatch.delenv(name, raising=False)

    config = get_env_config()

    assert config == {
        "log_level": "WARNING",
        "file_glob": "**/*.ts",
        "fn_types": "exported",
        "languages_config": None,
    }


def test_env_config_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "info")
    monkeypatch.setenv("TS_ANALYZER_FILE_GLOB", "src/**/*.tsx")
    monkeypatch.setenv("TS_ANALYZER_LANGUAGES_CONFIG", "/etc/languages.json")

    config = get_env_config()

    assert config["log_level"] == "INFO"
    assert config["file_glob"] == "src/**/*.tsx"
    assert config["languages_config"] == Path("/etc/languages.json")


def test_configure_logging_replaces_its_own_handler():
    root_logger = logging.getLogger()
    previous_level = root_logger.level

    configure_logging("INFO")
    configure_logging("INFO", verbose=True)

    ours = [
        handler
        for handler in root_logger.handlers
        if handler.formatter is not None and handler.formatter._fmt == LOG_FORMAT
    ]
    assert len(ours) == 1
    assert root_logger.level == logging.DEBUG

    root_logger.setLevel(previous_level)


def test_configure_logging_unknown_level_falls_back_to_warning(caplog):
    root_logger = logging.getLogger()
    previous_level = root_logger.level

    with caplog.at_level(logging.WARNING, logger="ts_analyzer.config"):
        configure_logging("VERBOSE")

    assert root_logger.level == logging.WARNING
    assert "Unknown log level 'VERBOSE', using WARNING" in caplog.text

    root_logger.setLevel(previous_level)
