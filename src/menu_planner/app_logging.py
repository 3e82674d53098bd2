"""Logging configuration helpers."""

import logging

LOGGER_NAME = "menu_planner"


def configure_logging(debug: bool = False) -> None:
    """Configure the package logger with a single stream handler.

    ``debug`` also surfaces ingredient names that found no food match.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    # httpx logs every TACO download at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
