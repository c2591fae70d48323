"""Logger setup for wiring runs."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_logger(name: str = "omnigraph", level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with a stream handler attached.

    Calling this twice for the same name does not add a second handler.

    Args:
        name: Logger name
        level: Level name (e.g. "DEBUG"); left unchanged if None

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not any(getattr(h, "_omnigraph_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._omnigraph_handler = True
        logger.addHandler(handler)

    if level is not None:
        logger.setLevel(level.upper())

    return logger
