"""Logging utilities for declassify commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .models import Diagnostic, Severity

_LOGGER_NAME = "declassify"

# Info diagnostics (e.g. dropped comments) are only interesting with --verbose.
_SEVERITY_LEVELS = {
    Severity.INFO: logging.DEBUG,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the declassify hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def log_diagnostic(
    logger: logging.Logger, diagnostic: Diagnostic, path: Optional[str] = None
) -> None:
    """Emit ``diagnostic`` at the level its severity maps to.

    The diagnostic code is attached to the record as ``diagnostic_code`` so
    file sinks and tests can filter on it.
    """
    level = _SEVERITY_LEVELS.get(diagnostic.severity, logging.WARNING)
    extra = {"diagnostic_code": diagnostic.code}
    if path:
        logger.log(level, "%s: %s", path, diagnostic, extra=extra)
    else:
        logger.log(level, "%s", diagnostic, extra=extra)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the declassify logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # The CLI may be invoked repeatedly in one process (tests).
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[declassify] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "log_diagnostic"]
