"""structlog setup for the cone_site app.

Every logger carries ``app=cone_site`` so detector, report and controller
events can be told apart from py4web's own output on the shared stdlib root.
"""

import logging
from typing import Any

import structlog

APP_NAME = "cone_site"


def setup_logging(level: str = "INFO") -> None:
    """Route structlog through stdlib logging at ``level``."""

    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **context: Any):
    """Logger for module ``name`` bound to the app name and any extra context."""

    return structlog.get_logger(name).bind(app=APP_NAME, **context)
