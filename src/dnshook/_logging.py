"""Logging utilities for dnshook."""

import logging
import sys
import time
from contextvars import ContextVar, Token
from datetime import datetime, timezone

# NullHandler on root logger (library best practice)
_root = logging.getLogger("dnshook")
_root.addHandler(logging.NullHandler())

# Hostname of the challenge currently being processed
_current_hostname: ContextVar[str | None] = ContextVar("current_hostname", default=None)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def set_hostname(hostname: str | None) -> Token[str | None]:
    """Set current hostname for logging context.

    Args:
        hostname: Hostname whose challenge is being processed.

    Returns:
        Token to reset the context.
    """
    return _current_hostname.set(hostname)


def reset_hostname(token: Token[str | None]) -> None:
    """Reset hostname context.

    Args:
        token: Token from set_hostname() call.
    """
    _current_hostname.reset(token)


def get_hostname_extra() -> dict[str, str]:
    """Get hostname info for log extra fields.

    Returns:
        Dict with 'hostname', or empty dict outside a challenge.
    """
    hostname = _current_hostname.get()
    if hostname is None:
        return {}
    return {"hostname": hostname}


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the dnshook namespace.

    Args:
        name: The module name (typically __name__).

    Returns:
        A logger instance for the module.
    """
    return logging.getLogger(name)


class BracketLevelFormatter(logging.Formatter):
    """Formatter with bracketed lowercase level tags and UTC timestamps."""

    _TAGS = {
        logging.DEBUG: "[debug]",
        logging.INFO: "[info]",
        logging.WARNING: "[warn]",
        logging.ERROR: "[error]",
        logging.CRITICAL: "[crit]",
    }

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    def format(self, record: logging.LogRecord) -> str:
        record.level_tag = self._TAGS.get(record.levelno, f"[lvl{record.levelno}]")
        message = super().format(record)
        hostname = getattr(record, "hostname", None)
        if hostname:
            message = f"{message} hostname={hostname}"
        return message


def configure_logging(level: str = "info") -> logging.Handler:
    """Attach a stderr handler to the dnshook logger.

    Intended for the command line entry point; library users configure
    logging themselves.

    Args:
        level: One of debug, info, warn/warning, error.

    Returns:
        The installed handler.

    Raises:
        ValueError: If level is not recognized.
    """
    try:
        numeric = _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(BracketLevelFormatter("%(asctime)s %(level_tag)s %(name)s: %(message)s"))
    _root.addHandler(handler)
    _root.setLevel(numeric)
    return handler


class Timer:
    """Context manager for timing operations.

    Usage:
        with Timer() as t:
            # do work
        print(f"Elapsed: {t.elapsed_ms}ms")
    """

    def __init__(self) -> None:
        self.elapsed_ms: float = 0
        self._start: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
