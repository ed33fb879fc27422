"""
Logging for routedoc.

Everything logs under the "routedoc" namespace; the host application's root
logger is left alone. Categories are logger name prefixes, e.g. "routedoc.core".
"""

import logging
import sys
from typing import IO, Optional

ROOT_LOGGER = "routedoc"
LOG_FORMAT = "%(levelname)-7s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


class CategoryFilter(logging.Filter):
    """Keeps records whose logger name starts with one of the categories."""

    def __init__(self, categories: list[str]):
        super().__init__()
        self.categories = categories

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.categories:
            return True
        return any(record.name.startswith(cat) for cat in self.categories)


def setup_logging(
    log_level: str = "INFO",
    log_categories: Optional[list[str]] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """
    Attach one stream handler to the "routedoc" logger.

    Calling again replaces the handler installed by the previous call; other
    handlers (pytest's caplog, the host app's) are not touched. Records do not
    propagate to the root logger while routedoc's handler is installed.
    """
    global _handler

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if log_categories:
        handler.addFilter(CategoryFilter(log_categories))

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    _handler = handler
    return handler


def teardown_logging() -> None:
    """Remove routedoc's handler and restore propagation."""
    global _handler
    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
