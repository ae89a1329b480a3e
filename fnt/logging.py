"""Logging utilities for fnt.

Loggers live under the ``fnt.`` namespace and write to stderr. Whether a
diagnostic is emitted at all is decided by a :class:`LogContext`, which
carries a :class:`~fnt.core.Verbosity` and is handed to each driver and
method instance, so two drivers can run at different verbosities.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Optional

from .core import Verbosity

_VERBOSITY_ENV_VAR = "FNT_VERBOSITY"

# Contexts do the gating, handlers pass everything through.
_DEFAULT_LEVEL = logging.DEBUG
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}

_LEVELS = {
    Verbosity.ERROR: logging.ERROR,
    Verbosity.WARN: logging.WARNING,
    Verbosity.INFO: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
}


def _verbosity_from_env() -> Verbosity:
    raw = os.getenv(_VERBOSITY_ENV_VAR)
    if not raw:
        return Verbosity.ERROR
    try:
        return Verbosity.parse(raw)
    except ValueError:
        return Verbosity.ERROR


_default_verbosity: Verbosity = _verbosity_from_env()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a cached logger under the ``fnt`` namespace.

    Args:
        name: Logger name (typically ``__name__``). If None, returns the
            package logger.

    Example:
        >>> from fnt.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    if name is None:
        name = "fnt"

    logger_name = name if name == "fnt" or name.startswith("fnt.") else f"fnt.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def configure_logging(
    level: int | str = _DEFAULT_LEVEL,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Replace the handlers of every fnt logger.

    Args:
        level: Logging level applied on top of the verbosity gate.
        format_string: Custom format string. If None, uses the default.
        stream: Output stream (default: sys.stderr).

    Example:
        >>> import io
        >>> from fnt.logging import configure_logging
        >>> configure_logging(stream=io.StringIO())
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def get_verbosity() -> Verbosity:
    """Verbosity given to contexts created without an explicit level."""
    return _default_verbosity


def set_verbosity(level: Verbosity | int | str) -> None:
    """Change the default verbosity for contexts created from now on.

    Existing contexts (and the drivers holding them) are not affected; use
    :meth:`fnt.driver.Driver.set_verbosity` for those.
    """
    global _default_verbosity
    _default_verbosity = Verbosity.parse(level)


@dataclass
class LogContext:
    """Verbosity gate in front of a logger."""

    verbosity: Verbosity = field(default_factory=get_verbosity)
    logger: logging.Logger = field(default_factory=lambda: get_logger("driver"))

    def __post_init__(self) -> None:
        self.verbosity = Verbosity.parse(self.verbosity)

    def enabled(self, level: Verbosity) -> bool:
        return level != Verbosity.NONE and self.verbosity >= level

    def log(self, level: Verbosity, msg: str, *args: Any) -> None:
        if self.enabled(level):
            self.logger.log(_LEVELS[level], msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self.log(Verbosity.ERROR, msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self.log(Verbosity.WARN, msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self.log(Verbosity.INFO, msg, *args)

    def debug(self, msg: str, *args: Any) -> None:
        self.log(Verbosity.DEBUG, msg, *args)

    def child(self, name: str) -> "LogContext":
        """Context with the same verbosity writing to ``fnt.<name>``."""
        return LogContext(verbosity=self.verbosity, logger=get_logger(name))


__all__ = [
    "LogContext",
    "configure_logging",
    "get_logger",
    "get_verbosity",
    "set_verbosity",
]
