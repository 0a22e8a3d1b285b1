"""structlog configuration shared by the handler and the local runner."""

import logging
import sys

import structlog

from dealscout.config import Settings, settings as default_settings


def configure_logging(settings: Settings = default_settings) -> None:
    """Configure stdlib logging and structlog once per process.

    Debug mode renders human-friendly console lines; otherwise every event
    is emitted as a single JSON object so log aggregators can index it.
    """
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.LOG_JSON and not settings.DEBUG
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
