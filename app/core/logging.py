"""
Structured logging configuration using structlog.

In development (app_env=dev): colored console output.
In all other environments: JSON output with timestamp, level, logger name and
every bound context var.

Two context vars are bound per request, so every line logged while handling
a tracking call can be correlated without passing ids around:

    request_id  bound by the request-id middleware in app.main (echoed back
                in the X-Request-ID response header)
    user_id     bound by app.api.deps.get_current_user_id once the bearer
                token has been resolved

Usage:
    from app.core.logging import configure_logging
    configure_logging(app_env="prod", log_level="INFO")

    # Services keep stdlib loggers; records still carry request_id/user_id.
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Tracking interaction: user=%s content=%s", user_id, content_id)

    # structlog directly for audit-style events with key/value payloads:
    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("attention_validated", content_id="c1", validated=True)
"""

import logging
import sys

import structlog

# Chatty third-party loggers kept at WARNING outside development
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "redis")


def configure_logging(app_env: str = "dev", log_level: str = "INFO") -> None:
    """
    Configure structlog with a stdlib bridge so all loggers (including
    uvicorn, sqlalchemy and redis) produce structured output.

    Args:
        app_env: "dev" renders to the console; anything else renders JSON.
        log_level: Root level name, e.g. "DEBUG" or "WARNING". Unknown names fall back to INFO.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if app_env == "dev":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    if app_env != "dev":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
