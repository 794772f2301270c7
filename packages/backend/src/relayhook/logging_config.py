"""structlog setup.

Learn: Loggers everywhere are plain `structlog.get_logger()`. This module
only decides how events are rendered:
- contextvars are merged first, so the request_id bound by
  RequestIdMiddleware shows up on every line of a request
- development gets the coloured console renderer, anything else JSON
"""

import logging

import structlog


def configure_logging(level: str = "INFO", environment: str = "development") -> None:
    renderer = (
        structlog.dev.ConsoleRenderer()
        if environment == "development"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )
