"""
Logging configuration shared by the auction engine, its escrow and the tests.

Loggers are named after the class that logs, e.g., `EnglishAuction`, and may be narrowed to an instance,
e.g., `EnglishAuction.<auction id>`, so that one auction can be traced among many.
"""

import logging
import time
from typing import Any


def configure_logging(
    level: int = logging.WARNING,
    handlers: list[logging.Handler] | None = None,
):
    """
    Configures logging format and log level.

    :param level: default = logging.WARNING
    :param handlers: root handlers - if not specified, then logging goes to stderr
    :return: None

    - log format: %(asctime)s [%(levelname)s] [%(name)s] %(message)s
    - timestamps are UTC

    >>> configure_logging(level=logging.DEBUG)
    >>> logger = logging.getLogger('EnglishAuction')
    >>> logger.info('bid accepted') # doctest: +SKIP
    2026-10-18 14:48:20,594 [INFO] [EnglishAuction] bid accepted

    """
    logging.Formatter.converter = time.gmtime
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
        level=level,
        handlers=handlers,
        force=True,
    )
    logging.captureWarnings(True)


def get_logger(obj: Any, name: str | None = None) -> logging.Logger:
    """
    Returns a logger using the class name as the logger name.
    If `name` is specifed, then it is appended to the class name: `{obj.__class__.__name__}.{name}`
    """
    logger = logging.getLogger(obj.__class__.__name__)
    if name is None:
        return logger

    return logger.getChild(name)
