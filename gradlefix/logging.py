"""Logging configuration for gradlefix."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "gradlefix"

# Chatty third-party loggers, kept at WARNING unless debugging
NOISY_LOGGERS = ("httpx", "httpcore")

# Diagnostics go to stderr so converted text on stdout stays clean
console = Console(stderr=True)


def resolve_level(verbose: bool = False, quiet: bool = False, log_level: str | None = None) -> int:
    """Pick the log level; an explicit ``log_level`` wins over the flags.

    Raises:
        ValueError: If ``log_level`` is not a standard level name
    """
    if log_level:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        return level
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False, log_level: str | None = None) -> None:
    """Send gradlefix log records to a rich handler on stderr.

    Args:
        verbose: Enable DEBUG level logging, including HTTP requests
        quiet: Show only WARNING and above
        log_level: Explicit log level (overrides verbose/quiet)
    """
    level = resolve_level(verbose, quiet, log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    # Build script snippets contain [brackets] that rich would read as markup
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``gradlefix`` namespace for ``name`` (usually ``__name__``)."""
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
