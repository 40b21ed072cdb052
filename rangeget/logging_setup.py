"""Console logging setup."""

import logging
import sys
from typing import Union

CONSOLE_FORMAT = "[+] %(message)s"
DEBUG_FORMAT = "[+] %(asctime)s %(levelname)s %(name)s: %(message)s"

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "asyncio",
]


def setup_logging(level: Union[int, str] = logging.INFO, suppress_noisy: bool = True) -> logging.Logger:
    """
    Configure the ``rangeget`` logger with a single console handler.

    Safe to call more than once; the previous handler is replaced.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("rangeget")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT if level <= logging.DEBUG else CONSOLE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    if suppress_noisy:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    return logger
