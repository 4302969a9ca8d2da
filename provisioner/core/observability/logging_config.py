"""
Logging configuration for the CLI entrypoint.

``configure()`` is called once at startup by main.py; modules only do
``logger = logging.getLogger(__name__)``.

Console level precedence:
    CLI flag  >  OCP_LOG_LEVEL env var  >  WARNING (default)

OCP_LOG_FILE / OCP_LOG_FILE_LEVEL add a file log.  Install scripts
can run for minutes, so the file log is the place to look when a
headless install fails without useful output.
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV = "OCP_LOG_LEVEL"
FILE_ENV = "OCP_LOG_FILE"
FILE_LEVEL_ENV = "OCP_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# (max level, format, datefmt), checked in order
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
)

_NOISY_LOGGERS = ("urllib3", "asyncio")


def resolve_level(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV, "WARNING")


def configure(verbose: bool = False, quiet: bool = False, debug: bool = False) -> None:
    """Set up logging from CLI flags plus the OCP_LOG_* environment."""
    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(FILE_ENV) or None,
        log_file_level=os.environ.get(FILE_LEVEL_ENV) or None,
        quiet_third_party=not debug,
    )


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Hold noisy third-party loggers at WARNING
            unless the console is at DEBUG.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next(
        ((f, d) for ceiling, f, d in _CONSOLE_FORMATS if level <= ceiling),
        ("%(message)s", None),
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
