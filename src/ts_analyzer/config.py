"""Environment configuration and logging setup."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_console_handler: Optional[logging.Handler] = None

logger = logging.getLogger(__name__)


def get_env_config() -> Dict[str, Any]:
    """Get configuration from environment variables."""
    languages_config = os.getenv("TS_ANALYZER_LANGUAGES_CONFIG")
    return {
        "log_level": os.getenv("LOG_LEVEL", "WARNING").upper(),
        "file_glob": os.getenv("TS_ANALYZER_FILE_GLOB", "**/*.ts"),
        "fn_types": os.getenv("TS_ANALYZER_FN_TYPES", "exported"),
        "languages_config": Path(languages_config) if languages_config else None,
    }


def configure_logging(level: str = "WARNING", verbose: bool = False) -> None:
    """Configure the root logger.

    Logs go to stderr so stdout carries only the report.

    Args:
        level: Log level name
        verbose: Force DEBUG logging
    """
    global _console_handler
    unknown_level = not verbose and not isinstance(logging.getLevelName(level), int)
    if verbose:
        log_level = logging.DEBUG
    elif unknown_level:
        log_level = logging.WARNING
    else:
        log_level = level

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)
    root_logger.addHandler(console_handler)
    _console_handler = console_handler

    if unknown_level:
        logger.warning(f"Unknown log level {level!r}, using WARNING")
