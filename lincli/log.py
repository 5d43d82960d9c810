"""Diagnostic logging to stderr through rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "lincli"


def setup_logging(verbose: bool, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the lincli and httpx loggers.

    WARNING by default, DEBUG when verbose. Safe to call more than once.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)

    for name in (LOGGER_NAME, "httpx"):
        target = logging.getLogger(name)
        for h in target.handlers[:]:
            if isinstance(h, RichHandler):
                target.removeHandler(h)
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            show_time=False,
        )
        target.addHandler(handler)
        target.setLevel(level)
        target.propagate = False
    return logger
