"""Logging configuration helpers for the quiz service."""

from __future__ import annotations

import logging
from logging import Logger

from quizmaster.core.config import settings


def configure_logging() -> Logger:
    """Configure basic logging for the service and return its logger."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("quizmaster")
