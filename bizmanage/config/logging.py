"""
Logging Configuration for BizManage Pro

Structured logging through structlog, rendered as JSON for log shipping or as
colored console output during development. Library loggers used by the API
(uvicorn, SQLAlchemy, the Anthropic SDK and its httpx transport) are routed
through the same handler so every line shares one format.
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from bizmanage.config.settings import Settings, get_settings

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Event keys whose values never reach the log output
REDACTED_KEYS = frozenset({"api_key", "password", "password_hash", "authorization", "x-api-key"})


def redact_secrets(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask credential values bound to a log event."""
    for key in event_dict:
        if key.lower() in REDACTED_KEYS:
            event_dict[key] = "***"
    return event_dict


def library_log_levels(settings: Settings, app_level: int) -> Dict[str, int]:
    """
    Levels for third-party loggers.

    SQL statements are only logged when `DATABASE_ECHO` is on. The Anthropic
    SDK and httpx log every request at INFO/DEBUG, so they stay at WARNING
    unless the app itself runs at DEBUG.
    """
    client_level = logging.DEBUG if app_level <= logging.DEBUG else logging.WARNING
    return {
        "sqlalchemy.engine": logging.INFO if settings.database.echo else logging.WARNING,
        "sqlalchemy.pool": logging.WARNING,
        "aiosqlite": logging.WARNING,
        "anthropic": client_level,
        "httpx": client_level,
        "httpcore": logging.WARNING,
        "faker": logging.WARNING,
    }


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level = log_level or settings.monitoring.log_level

    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # request_id comes in through contextvars (see RequestLoggingMiddleware)
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.monitoring.log_format == "json":
        renderer = JSONRenderer()
    else:
        # Human-readable console output
        renderer = structlog.dev.ConsoleRenderer(colors=not settings.is_production)

    formatter = ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers (configure_logging may run once per lifespan)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # uvicorn installs its own handlers; replace them so access logs are structured
    for logger_name in SERVER_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.addHandler(console_handler)
        logger.setLevel(numeric_level)
        logger.propagate = False

    # Library loggers propagate to the root handler
    for logger_name, library_level in library_log_levels(settings, numeric_level).items():
        logging.getLogger(logger_name).setLevel(library_level)

    log = structlog.get_logger(__name__)
    log.info(
        "Logging configured",
        level=level,
        format=settings.monitoring.log_format,
        environment=settings.app_env,
        sql_echo=settings.database.echo,
    )
