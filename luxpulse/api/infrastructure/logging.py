"""Loguru setup with request/tick context carried in a ContextVar."""

import contextvars
import sys
from typing import Any

from loguru import logger

from luxpulse.config import LoggingConfig

# Keys every sink can rely on; "-" when no context set them
CONTEXT_KEYS = ("correlation_id", "tick_id", "fixture")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[correlation_id]}</cyan>:<cyan>{extra[tick_id]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra} | {name}:{function}:{line} | {message}"

log_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("log_context", default={})


class LoggingContext:
    """
    Tag every log line emitted inside the block.

    Contexts nest; inner values shadow outer ones until the block exits.

    Example:
        with LoggingContext(tick_id=7, fixture="offline-event-ticket"):
            logger.info("Replaying fixture")
    """

    def __init__(self, **values):
        self.values = values
        self._token: contextvars.Token | None = None

    def __enter__(self):
        self._token = log_context.set({**log_context.get(), **self.values})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            log_context.reset(self._token)
            self._token = None


def get_logging_context() -> dict[str, Any]:
    return dict(log_context.get())


def _inject_context(record) -> bool:
    extra = record["extra"]
    for key in CONTEXT_KEYS:
        extra.setdefault(key, "-")
    extra.update(log_context.get())
    return True


def configure_structured_logging(config: LoggingConfig | None = None):
    """
    Replace loguru's default handler with the LuxPulse sinks.

    Called once per process, from the API lifespan or the worker entry point.
    The console always gets coloured text; a rotating file sink is added when
    ``LOG_FILE_PATH`` is set (JSON lines with ``LOG_SERIALIZE=true``).
    """
    config = config or LoggingConfig()

    logger.remove()
    logger.add(
        sink=sys.stderr,
        format=CONSOLE_FORMAT,
        filter=_inject_context,
        level=config.level.upper(),
        colorize=True,
    )

    if config.file_path:
        logger.add(
            sink=config.file_path,
            format=FILE_FORMAT,
            filter=_inject_context,
            level="INFO",
            rotation="100 MB",
            retention="30 days",
            compression="zip",
            serialize=config.serialize,
        )


def log_with_context(level: str, message: str, **extra_context):
    """Log one message with extra fields on top of the current context."""
    logger.bind(**{**get_logging_context(), **extra_context}).log(level.upper(), message)
