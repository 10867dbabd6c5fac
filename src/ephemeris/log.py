"""structlog configuration.

Every module logs through ``structlog.get_logger()`` with dotted event
names and key/value context. The request-id middleware binds
``request_id`` into contextvars, merged in here.
"""

import logging
import sys

import structlog

from ephemeris.config import settings


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Configure structlog and the stdlib root logger once at startup."""
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json is None else json

    level_no = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level_no)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        cache_logger_on_first_use=True,
    )
