"""Logging configuration helpers."""

import logging

_LOGGER_NAME = "table_cache"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure cache logging with a single stream handler.

    The level is applied on every call; the handler is installed once.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
