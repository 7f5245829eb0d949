"""
Logging setup for the command line entry point.

Library modules only create loggers; handlers are installed here, once.
"""

import logging
from typing import Optional

_LOGGER_CONFIGURED = False

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Configure console logging, plus a file handler if log_file is given.

    Calling it again is a no-op.
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    logger = logging.getLogger('tessvg')
    logger.setLevel(level)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        try:
            fh = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logger.warning("Could not open log file %s: %s", log_file, e)
        else:
            fh.setLevel(level)
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    _LOGGER_CONFIGURED = True
