"""structlog setup for the bot process.

Records go to stderr through the standard library root logger. Outside
production they are rendered for a terminal; with ENVIRONMENT=production
every record is one JSON object per line.

    configure_logging(log_level="debug")
    logger = get_logger(__name__)
    logger.info("user_executed_command", command="start", user_id=42)
"""

import logging
import sys
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import Processor

# Level names accepted on the command line, mapped to logging constants
LOG_LEVELS: dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Chatty dependencies; python-telegram-bot logs every getUpdates round trip
_QUIET_LOGGERS = ("telegram", "httpx", "httpcore", "aiohttp.access")


def resolve_level(name: str) -> int:
    """Map a level name such as "warn" to its logging constant, INFO if unknown."""
    return LOG_LEVELS.get(name.strip().lower(), logging.INFO)


def _build_processors(development: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Install the structlog pipeline and the root handler.

    Args:
        development: Console output when True, JSON when False. Defaults to
            JSON only when ENVIRONMENT is "production".
        log_level: One of error, warn, info, debug. Defaults to LOG_LEVEL,
            then info.
    """
    if development is None:
        development = getenv("ENVIRONMENT", "development").lower() != "production"
    level = resolve_level(log_level if log_level is not None else getenv("LOG_LEVEL", "info"))

    structlog.configure(
        processors=_build_processors(development),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    logging.getLogger().setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_contextvars(**kwargs: Any) -> None:
    """Attach key/values to every record logged from the current context.

    The dispatch middleware binds correlation_id, event and user_id for the
    duration of one update.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_contextvars(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
