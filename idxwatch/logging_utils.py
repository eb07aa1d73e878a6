"""Central logging configuration used across modules."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "idxwatch"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Configure and return the app logger.

    Logs go to stderr through rich, plus an optional file if ``log_file`` is set.
    Calling this again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False

    if logger.handlers:
        return logger

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        log_time_format=f"[{DATE_FORMAT}]",
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger
