"""
Structured logging for the import engine using python-json-logger.

Every record carries the engine name, version and active bid form layout,
so logs from several imports can be told apart. Logs go to stderr; stdout
belongs to the CLI's JSON output.
"""

import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from bidform.core.config import settings

ENGINE_HANDLER_NAME = "bidform"

# Chatty at INFO while loading workbooks
QUIET_LOGGERS = ("openpyxl",)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps engine and layout fields on each record."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = settings.PROJECT_NAME
        log_record["version"] = settings.VERSION
        log_record["layout"] = settings.BID_FORM_LAYOUT
        log_record["level"] = record.levelname


def build_formatter(debug: bool) -> logging.Formatter:
    """Plain text when debugging, JSON otherwise."""
    if debug:
        return logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    return CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(debug: bool | None = None) -> logging.Handler:
    """
    Install the engine's handler on the root logger.

    Calling it again replaces the engine handler instead of adding a
    second one; handlers installed by anything else are left alone.

    Args:
        debug: Force debug mode on or off; defaults to settings.DEBUG

    Returns:
        The installed handler
    """
    debug = settings.DEBUG if debug is None else debug

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(ENGINE_HANDLER_NAME)
    handler.setFormatter(build_formatter(debug))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == ENGINE_HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler


def get_logger(name: str) -> logging.Logger:
    """Module logger; call as get_logger(__name__)."""
    return logging.getLogger(name)
