# storefront/utils/logger.py
from __future__ import annotations

import logging

LOGGER_NAME = "storefront"


def setup_logger(level: str | int = "INFO") -> logging.Logger:
    """
    Configure the application logger.

    Modules log through ``logging.getLogger(__name__)``, which lands under
    ``storefront.*`` and propagates here. Calling this more than once only
    updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Avoid duplicate handlers if setup_logger() is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
