"""Logging setup shared by the library and the CLI.

Modules log either through ``logging.getLogger(__name__)`` or, for
structured events, through ``get_logger``; both are rendered by the same
structlog processor chain under the ``gravefinder`` logger.

Environment:
    GRAVEFINDER_LOG_LEVEL   DEBUG/INFO/WARNING/ERROR (default WARNING)
    GRAVEFINDER_LOG_JSON    "0" switches to plain console lines
"""
from __future__ import annotations

import logging
import os
from typing import Literal

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="ISO"),
]


def configure_logging(level: LogLevel | None = None, json: bool | None = None) -> None:
    level = level or os.getenv("GRAVEFINDER_LOG_LEVEL", "WARNING").upper()
    if json is None:
        json = os.getenv("GRAVEFINDER_LOG_JSON", "1").strip().lower() not in {"0", "false", "no"}
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger("gravefinder")
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level, logging.WARNING))
    root.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "gravefinder"):
    return structlog.get_logger(name)


# Initialize default config
configure_logging()
