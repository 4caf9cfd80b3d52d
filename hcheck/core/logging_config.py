"""Logging configuration for hcheck.

Keep configuration generation separate from its application:

    - `get_logging_config`: Generate a standard Python logging configuration
      dictionary from settings.
    - `configure_structlog_wrapper`: Configure structlog's logger factory and
      processor chain.
    - `configure_logging`: Apply both, safe to call more than once.

Records are written one per line to stdout. The default `json` format emits
objects with at least ``level`` and ``message`` keys.
"""

import logging.config
from typing import Any

import structlog
from structlog.types import Processor

from hcheck.config import Settings

# Library loggers capped at WARNING so a check emits exactly one outcome record.
NOISY_MODULES: tuple[str, ...] = ("httpx", "httpcore")


# =============================================================================
# CONFIGURATION GENERATORS
# =============================================================================


def get_common_processors() -> list[Processor]:
    """Return the steps that fill in every record before it is rendered.

    Adds logger name, level and a UTC ISO timestamp, and serializes any
    attached exception, for both hcheck records and foreign stdlib records.

    Returns:
        list[Processor]: Ordered list of structlog processors.
    """
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def get_render_processors(settings: Settings) -> list[Processor]:
    """Return the final formatting steps for the configured output format.

    JSON output renames structlog's ``event`` key to ``message``.

    Args:
        settings: Settings providing LOG_FORMAT.

    Returns:
        list[Processor]: Processors run by `structlog.stdlib.ProcessorFormatter`.
    """
    if settings.LOG_FORMAT == "console":
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.processors.EventRenamer("message"),
        structlog.processors.JSONRenderer(),
    ]


def get_logging_config(settings: Settings) -> dict[str, Any]:
    """Generate a logging configuration dictionary for `logging.config.dictConfig`.

    Note:
        This is a pure function that does not modify global state.

    Args:
        settings: Settings containing LOG_LEVEL and LOG_FORMAT.

    Returns:
        dict[str, Any]: Configuration dictionary compatible with dictConfig.
    """
    log_level = settings.LOG_LEVEL.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "structlog.stdlib.ProcessorFormatter",
                "processors": get_render_processors(settings),
                "foreign_pre_chain": get_common_processors(),
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": True,
            },
            **{
                lib: {"level": "WARNING", "propagate": False}
                for lib in NOISY_MODULES
            },
        },
    }


def configure_structlog_wrapper() -> None:
    """Route structlog calls through stdlib logging.

    Records are handed to the `ProcessorFormatter` installed by
    `get_logging_config`, which renders them on stdout. Level filtering is
    delegated to the stdlib logger, so reapplying `logging.config.dictConfig`
    later changes the effective level of loggers that structlog already
    cached.
    """
    structlog_processors = [
        structlog.stdlib.filter_by_level,
        *get_common_processors(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=structlog_processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: Settings) -> None:
    """Apply the stdlib and structlog configuration for `settings`.

    Args:
        settings: Settings providing the logging fields.
    """
    logging.config.dictConfig(get_logging_config(settings))
    configure_structlog_wrapper()


# =============================================================================
# LOGGER RETRIEVAL
# =============================================================================


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger whose records carry `name` in ``logger``.

    Args:
        name: Dotted logger name, usually the calling module. Omit for root.
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
