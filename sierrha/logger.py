# File: sierrha/logger.py
"""Logging for the **Sierrha** error handlers.

All modules share one logger::

      from sierrha.logger import logger
      logger.warning("Error page %s could not be fetched", url)

Records go to stderr (stdout carries pages rendered by the CLI) and, when
``log_file`` is given, to a rotating file. :func:`configure` may be called
again at any time; it replaces the previous handlers.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "Sierrha"

_LevelT = Union[int, str]


def _handlers(log_file: str | Path | None, fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "WARNING",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """(Re)configure the project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a logfile. *None* → stderr only.
    log_format
        Format string for :class:`logging.Formatter`, set by ``--log-format``.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()
    for handler in _handlers(log_file, log_format):
        lg.addHandler(handler)

    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["DEFAULT_FORMAT", "LOGGER_NAME", "logger", "configure"]
