"""
Shared stderr console and optional rich logging.

Faults, spinners and log records all draw on the same rich Console so their
output interleaves cleanly (a fault raised while a spinner is live is printed
above it rather than through it).
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def install_logging(level=logging.WARNING, /, *, logger="taskctr"):
    """
    Attach a RichHandler bound to the shared console to the package logger.

    The package logs registration, resolution and invocation at DEBUG level;
    call install_logging(logging.DEBUG) in a tool's entry point to see them.
    Calling it again replaces the previously installed handler instead of
    stacking a second one.

    Returns the configured logging.Logger.
    """
    logger = logging.getLogger(logger)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = (
    "console",
    "install_logging",
)
