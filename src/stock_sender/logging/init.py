from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Console output uses one label per line (INFO|WARN|ERROR|SUMMARY) followed
by the message. The application logger is "stock_sender"; module loggers
created with logging.getLogger(__name__) are its children and share the
handler.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_debug",
    "reset_logging",
]

APP_LOGGER_NAME = "stock_sender"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter that prefixes each message with its level label."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging() -> logging.Logger:
    """Configure the application logger (idempotent).

    Output goes to stdout, consistent with the CLI contract.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # no duplicate lines through the root logger
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def set_debug(enabled: bool = True) -> None:
    get_logger().setLevel(logging.DEBUG if enabled else logging.INFO)


def reset_logging() -> None:
    """Drop the configured handler and restore defaults. Mainly for tests."""
    global _logger
    logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    _logger = None
