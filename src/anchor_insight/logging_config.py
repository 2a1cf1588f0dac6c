"""
Logging configuration for Anchor Insight.

Routes library logging through a rich handler on stderr so that metric
tables and JSON written to stdout stay clean. Levels apply to the
``anchor_insight`` namespace only; other libraries stay at WARNING.

What each level shows:
    ERROR    runs that produced no metrics
    WARNING  skipped files (unreadable, oversized, unparseable) and timeouts
    INFO     the per-run summary (analyzed / skipped / functions)
    DEBUG    per-file function, handler and statement counts
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "anchor_insight"

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    """Terminal log level for the CLI flags; quiet wins over verbose."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure logging for a CLI run.

    The terminal gets the level chosen by ``verbose``/``quiet``. A log file,
    when given, always records DEBUG so per-file details are kept even for a
    quiet terminal run.

    Args:
        verbose: Show per-file DEBUG lines on the terminal
        quiet: Show only errors on the terminal
        log_file: Optional file path to append logs to

    Returns:
        Configured logger instance for anchor_insight
    """
    level = console_level(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            level=level,
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]
    package_level = level

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)
        package_level = logging.DEBUG

    # force=True so repeated CLI invocations in one process pick up the new handlers
    logging.basicConfig(
        level=logging.WARNING, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(package_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'anchor_insight.analysis')
              If None, returns the root anchor_insight logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
