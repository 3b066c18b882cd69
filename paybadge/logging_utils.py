"""Logging setup for the paybadge CLI and server."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "paybadge"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Route paybadge log records to stderr through Rich.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True, legacy_windows=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)

    return logger
