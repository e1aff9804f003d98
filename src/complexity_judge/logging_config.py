"""
Logging configuration for complexity-judge.

Terminal output goes through rich on stderr. Output captured from the
external analysis tools is logged under ``complexity_judge.tools.<check>``
so it can be filtered separately from the judge's own messages.
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "complexity_judge"
TOOLS_LOGGER = f"{ROOT_LOGGER}.tools"

_LEVELS: Dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the complexity_judge logger.

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings) or "verbose" (debug)
        log_file: Optional file path; receives every record at DEBUG level,
                  tool output included

    Returns:
        The configured complexity_judge logger

    Calling this again replaces the handlers installed by the previous call.
    """
    level = _LEVELS.get(verbosity, logging.WARNING)
    verbose = verbosity == "verbose"

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        # tool output and paths may contain [brackets]
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'complexity_judge.pipeline')
              If None, returns the root complexity_judge logger
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def get_tool_logger(check_name: str) -> logging.Logger:
    """Logger for raw output captured from the tool behind ``check_name``."""
    return logging.getLogger(f"{TOOLS_LOGGER}.{check_name}")
