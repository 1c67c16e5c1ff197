"""Logging configuration helpers."""

import logging

from pet_nutrition.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure package logging with a single stream handler."""
    logger = logging.getLogger("pet_nutrition")
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
