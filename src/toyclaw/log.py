# src/toyclaw/log.py
"""Logging setup for the toyclaw CLI.

Library modules only call logging.getLogger(__name__); handlers are
installed here by the application entry point.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("LiteLLM", "litellm", "httpx", "httpcore", "pdfminer")


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route log records through Rich.

    Args:
        verbose: Log at DEBUG instead of INFO.
        console: Console to write to (defaults to stderr).
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
