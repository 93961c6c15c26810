# domain_scout/logger.py
"""Logging for DomainScout.

All modules log through one named logger::

    from domain_scout.logger import logger
    logger.info("%s [%d left] %d %s", domain, left, status, title)

The CLI calls :func:`setup_logging` once per invocation; importing the module
gives a console-only logger at INFO.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "DomainScout"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

#: rotate the optional log file at 5 MiB, keep three old files
_ROTATE_BYTES = 5 * 1024 * 1024
_ROTATE_KEEP = 3


def setup_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = LOG_FORMAT,
) -> logging.Logger:
    """Point the project logger at stdout (and *log_file*, if given).

    Previous handlers are closed and dropped, so calling this again after
    ``sys.stdout`` was swapped rebinds output to the new stream.
    """
    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_KEEP, encoding="utf-8"
            )
        )

    lg = logging.getLogger(LOGGER_NAME)
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.setLevel(level)
    lg.propagate = False
    return lg


logger: logging.Logger = setup_logging()

__all__ = ["logger", "setup_logging", "LOGGER_NAME", "LOG_FORMAT"]
