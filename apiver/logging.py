"""Logging and timing utilities for apiver commands."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "apiver"
_PERF_ENV = "APIVER_MEASURE_PERF"

_measure_enabled = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the apiver hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    measure: bool | None = None,
) -> logging.Logger:
    """Configure the apiver logger with console output and an optional file sink.

    ``measure`` switches timing output from :func:`track` on or off; when left
    as ``None`` the ``APIVER_MEASURE_PERF`` environment variable decides.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[apiver] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    set_measure_enabled(measure if measure is not None else bool(os.environ.get(_PERF_ENV)))
    return logger


def set_measure_enabled(enabled: bool) -> None:
    global _measure_enabled
    _measure_enabled = enabled


def measure_enabled() -> bool:
    return _measure_enabled or bool(os.environ.get(_PERF_ENV))


@contextmanager
def track(name: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """Log how long the wrapped block took when performance measurement is on."""
    start = time.perf_counter()
    try:
        yield
    finally:
        if measure_enabled():
            elapsed = time.perf_counter() - start
            (logger or get_logger("measure")).info("%s took %.3fs", name, elapsed)


__all__ = [
    "configure_logging",
    "get_logger",
    "measure_enabled",
    "set_measure_enabled",
    "track",
]
