"""Logging configuration module."""

import logging

from wardrobe.core.config import settings


def configure_logging() -> None:
    """Configure root logger according to project conventions."""

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
