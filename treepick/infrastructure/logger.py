"""
Package-wide logger for treepick.

Progress and status records go to standard output, warnings and errors
to standard error. The streams are looked up at emit time so that
redirected or captured streams are honoured.
"""

import logging
import sys


LOGGER_NAME = "TreePick"


class ConsoleHandler(logging.StreamHandler):
    """Stream handler splitting records between stdout and stderr by level."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        self.setStream(sys.stderr if record.levelno >= logging.WARNING else sys.stdout)
        super().emit(record)


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return the named logger, attaching the console handler once."""

    _logger = logging.getLogger(name)
    if not any(isinstance(h, ConsoleHandler) for h in _logger.handlers):
        handler = ConsoleHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)
        _logger.setLevel(logging.INFO)
    return _logger


logger = get_logger()


__all__ = [
    "LOGGER_NAME",
    "ConsoleHandler",
    "get_logger",
    "logger",
]
