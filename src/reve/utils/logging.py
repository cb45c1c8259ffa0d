"""Logging configuration with Rich formatting.

Build and watch progress is reported through standard ``logging`` records.
The library itself never installs handlers; entry points such as the
command line call ``configure_module_logger("reve")`` so every submodule
logger propagates to one Rich handler.
"""

import logging
import sys
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_KEYWORDS = ["resource", "Building", "Built", "Rebuilt", "index", "Watching"]


def configure_module_logger(
    module_name: str,
    level: int = logging.INFO,
    use_colors: bool = True,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Attach a dedicated handler to a package logger.

    Args:
        module_name: Logger name, e.g. ``"reve"``.
        level: Logging level.
        use_colors: Use a Rich handler (default) or a plain stream handler.
        console: Optional Rich Console instance (default: stderr console).

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler: Union[RichHandler, logging.Handler]
    if use_colors:
        if console is None:
            console = Console(stderr=True, legacy_windows=False)
        handler = RichHandler(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            markup=True,
            show_level=True,
            level=logging.NOTSET,  # Allow logger to control filtering
            omit_repeated_times=False,
            keywords=_KEYWORDS,
        )
        handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    logger.addHandler(handler)
    logger.propagate = False

    return logger
