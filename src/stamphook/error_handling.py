"""Error handling utilities for non-fatal install conditions."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")


def tolerate(
    *errors: type[BaseException],
    logger: logging.Logger,
    operation: str,
    default_factory: Callable[[], R],
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator that turns the listed exceptions into a logged warning.

    Installing a hook is a convenience for the project being built, so
    conditions such as a missing repository must not fail the build. Only
    the listed exception types are caught; anything else propagates.

    Args:
        *errors: Exception types treated as non-fatal.
        logger: Logger instance for the warning.
        operation: Name of the operation (for the log message).
        default_factory: Callable that returns the value used on error.

    Returns:
        Decorator function.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return func(*args, **kwargs)
            except errors as exc:
                logger.warning("Skipping %s: %s", operation, exc)
                return default_factory()

        return wrapper

    return decorator
