"""
Logging Setup - HR Assessment Scoring Engine
app/logging_config.py

Configures stdlib logging for repositories/services and structlog for the
scoring engine's structured events. Called once at application startup.
"""

import logging

import structlog

from app.config import Settings


def configure_logging(settings: Settings) -> None:
    """Apply LOG_LEVEL / LOG_FORMAT from settings to logging and structlog."""
    level = getattr(logging, settings.LOG_LEVEL)

    logging.basicConfig(
        level=level,
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    if settings.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
