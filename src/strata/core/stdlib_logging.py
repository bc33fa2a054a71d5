from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from strata.core.utils.io import ensure_directory

LOGGER_NAME = "strata"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_STRATA_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    level: str = "WARNING",
    *,
    log_file: Optional[Path] = None,
    json_mode: bool = False,
) -> logging.Logger:
    """Configure the ``strata`` logger.

    Logs go to ``log_file`` when given, else to stderr. In ``json_mode`` without
    a log file only a NullHandler is installed, keeping stdout/stderr machine
    readable. Calling again replaces the handler installed by the previous call.
    """
    global _STRATA_HANDLER

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_name(level))
    logger.propagate = False

    if _STRATA_HANDLER is not None:
        logger.removeHandler(_STRATA_HANDLER)
        _STRATA_HANDLER.close()
        _STRATA_HANDLER = None

    handler: logging.Handler
    if log_file is not None:
        resolved = Path(log_file).resolve()
        ensure_directory(resolved.parent)
        handler = logging.FileHandler(resolved, encoding="utf-8")
    elif json_mode:
        handler = logging.NullHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    _STRATA_HANDLER = handler
    return logger


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by :func:`configure_logging`."""
    global _STRATA_HANDLER
    logger = logging.getLogger(LOGGER_NAME)
    if _STRATA_HANDLER is not None:
        logger.removeHandler(_STRATA_HANDLER)
        _STRATA_HANDLER.close()
    _STRATA_HANDLER = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = ["configure_logging", "reset_logging_for_tests", "LOGGER_NAME"]
