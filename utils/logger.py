# Directory: utils/logger.py
"""
Logging configuration for the workforce manager.
"""
import logging
import sys
from typing import IO, Optional, Union


def setup_logger(
    name: str = "workforce",
    level: Union[int, str] = logging.INFO,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Set up and configure a logger."""
    logger = logging.getLogger(name)

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    # Existing handlers only get their level and stream refreshed
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
            if stream is not None and isinstance(handler, logging.StreamHandler):
                handler.setStream(stream)
        return logger

    logger.setLevel(level)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


# Default logger for the application
logger = setup_logger()
