"""Logging configuration for stamphook."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Installs report one INFO line per written hook; skips and failures are
# WARNING and above, so QUIET_LEVEL keeps only what needs attention.
DEFAULT_LEVEL = "INFO"
DEBUG_LEVEL = "DEBUG"
QUIET_LEVEL = "WARNING"


def select_level(*, explicit: str | None, debug: bool, quiet: bool) -> str:
    """
    Pick the log level from command-line flags.

    Args:
        explicit: Level given with --log-level, if any. Always wins.
        debug: Whether --debug was given.
        quiet: Whether --quiet was given. Ignored when debug is set.

    Returns:
        Log level name.
    """
    if explicit is not None:
        return explicit
    if debug:
        return DEBUG_LEVEL
    if quiet:
        return QUIET_LEVEL
    return DEFAULT_LEVEL


def configure_logging(
    *, level: str = DEFAULT_LEVEL, log_file: Path | None = None
) -> None:
    """
    Configure logging for stamphook.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Output lands in build logs next to other tools, so lines carry the
    # tool name instead of a timestamp.
    formatter = logging.Formatter(
        fmt="stamphook: %(levelname)s: %(message)s",
    )

    # Get root logger for stamphook
    logger = logging.getLogger("stamphook")
    logger.setLevel(log_level)

    # Clear any existing handlers
    logger.handlers.clear()

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name under the stamphook namespace.

    Args:
        name: Logger name (will be prefixed with 'stamphook.').

    Returns:
        Logger instance.
    """
    return logging.getLogger(f"stamphook.{name}")
