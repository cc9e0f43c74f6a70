# h5datastore/log.py
"""
Logging setup for the h5datastore library.

The library only creates loggers. Applications call `configure_logging()`
once to choose a level and a renderer.
"""
import logging
from typing import cast

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import BoundLogger
from structlog.types import Processor


def _coerce_level(level: str | int) -> int:
    """Translate a string/int level into the numeric logging level."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def configure_logging(level: str | int = "INFO", json_output: bool = False) -> None:
    """
    Configures structlog on top of the stdlib logging module.

    Warnings issued by the library, such as variables dropped from the
    unified schema, are captured into the same log stream.
    """
    numeric_level = _coerce_level(level)
    renderer = structlog.processors.JSONRenderer() if json_output else ConsoleRenderer()

    shared_processors: list[Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=[handler], force=True)
    logging.captureWarnings(True)


def get_logger(name: str) -> BoundLogger:
    """
    Returns a structlog logger for a library module.

    The logger follows whatever `configure_logging()` (or the application)
    installed, and structlog's defaults until then.
    """
    return cast(BoundLogger, structlog.get_logger(name))
