"""
Logging configuration — one-time setup for the CLI.

Every module logs through ``logging.getLogger(__name__)``; this module
only decides where those records go and how they look. User-facing
output (mod lists, update summaries) goes through click, not logging.

Levels are resolved in precedence order:
    --debug / --verbose / --quiet  >  RLI_LOG_LEVEL  >  WARNING (default)

Optional file output via RLI_LOG_FILE / RLI_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "RLI_LOG_LEVEL"
ENV_LOG_FILE = "RLI_LOG_FILE"
ENV_LOG_FILE_LEVEL = "RLI_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

_FMT_MINIMAL = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_CONSOLE = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy below WARNING
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(level: str = "WARNING", log_file: str | None = None,
                  log_file_level: str | None = None) -> None:
    """Configure the root logger for the process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path; defaults to ``$RLI_LOG_FILE``.
        log_file_level: Level for the file; defaults to ``$RLI_LOG_FILE_LEVEL``
            and then to ``level``.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_LOG_FILE)
    log_file_level = log_file_level or os.environ.get(ENV_LOG_FILE_LEVEL)

    if console_level <= logging.DEBUG:
        fmt = _FMT_DEBUG
    elif console_level <= logging.INFO:
        fmt = _FMT_VERBOSE
    else:
        fmt = _FMT_MINIMAL

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=_DATEFMT_CONSOLE))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        effective = min(effective, file_level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(handler)

    root.setLevel(effective)

    if console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric value (WARNING when unknown)."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
