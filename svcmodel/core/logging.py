"""Logging setup helpers."""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Union[int, str, None] = None, debug: bool = False) -> logging.Logger:
    """
    Configure the ``svcmodel`` logger hierarchy.

    Args:
        level: Log level name or number. Defaults to INFO.
        debug: When True, also turn on SQLAlchemy's engine logger so
            every emitted statement is logged.

    Returns:
        The package root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    level = level or logging.INFO

    logger = logging.getLogger("svcmodel")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)

    if debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return logger
