"""
Logging Utility for the recurring task engine.

Provides structured JSON logging with appropriate levels and formats.
"""

import json
import logging
import sys
from typing import Dict, Union

from recurring_todo.utils.dates import utcnow

ROOT_LOGGER_NAME = "recurring_todo"


class StructuredLogger:
    """Structured logger emitting one JSON document per record."""

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name, nested under the package root logger
        """
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self.logger = logging.getLogger(name)

    def _log_structured(self, level: int, message: str, **kwargs):
        """
        Log a structured message.

        Args:
            level: Logging level
            message: Log message
            **kwargs: Additional structured data
        """
        if self.logger.isEnabledFor(level):
            log_data = {
                "timestamp": utcnow().isoformat(),
                "level": logging.getLevelName(level),
                "message": message,
                "service": self.logger.name,
            }
            log_data.update(kwargs)
            self.logger.log(level, json.dumps(log_data, default=str))

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message."""
        self._log_structured(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with traceback."""
        if self.logger.isEnabledFor(logging.ERROR):
            log_data = {
                "timestamp": utcnow().isoformat(),
                "level": "ERROR",
                "message": message,
                "service": self.logger.name,
                "exception": True,
            }
            log_data.update(kwargs)
            self.logger.exception(json.dumps(log_data, default=str))


_loggers: Dict[str, StructuredLogger] = {}


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Attach a stdout handler to the package root logger and set its level."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    # Prevent adding handlers multiple times
    if not root.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root.addHandler(console_handler)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger for the specified component.

    Args:
        name: Component name

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]
