"""Debug-log configuration for the fluentcheck logger hierarchy."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(name)s %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logger(
    debug_file: Path, verbose: bool = False, logger_name: str = "fluentcheck"
) -> logging.Logger:
    """
    Route fluentcheck's lifecycle tracing into a debug log.

    Child loggers (``fluentcheck.fixtures``, ``fluentcheck.reporter``, ...)
    propagate into the configured logger, so fixture registration, before-all
    runs and reporter summaries all land in *debug_file*.

    Args:
        debug_file: Path to the debug log, appended to. Parent directories are
            created.
        verbose: Also mirror every record to stderr.
        logger_name: Logger to configure.

    Returns:
        The configured logger.

    Raises:
        RuntimeError: If the logger already has handlers, which would make two
            debug logs share output.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        raise RuntimeError(
            f"Logger '{logger_name}' already exists with handlers attached; "
            "use a unique logger name"
        )

    logger.disabled = False
    logger.setLevel(logging.DEBUG)

    debug_file.parent.mkdir(parents=True, exist_ok=True)
    _attach(logger, logging.FileHandler(debug_file, mode="a"))
    if verbose:
        _attach(logger, logging.StreamHandler(sys.stderr))

    logger.debug(f"Debug log opened at {debug_file}")
    return logger


def close_logger(logger: logging.Logger) -> None:
    """Detach and close every handler added by :func:`setup_logger`."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
