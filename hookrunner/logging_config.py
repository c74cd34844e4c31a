"""Structured logging for hookrunner.

Logs are the only place an operator sees what a push did: each executed
command and its captured stdout (``command_executed``), each failed command
with its output and stderr (``command_failed``), rejected request bodies and
config reloads. uvicorn's connection and startup messages go through the
same root handler, so one stream carries both server and dispatch events.
"""

from __future__ import annotations

import logging
import sys

import structlog

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(*, json_logs: bool = True, log_level: str = "INFO") -> None:
    """Route structlog and uvicorn output through one stdout handler.

    Args:
        json_logs: Render logs as JSON when *True*; use the console renderer
            when *False*.
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    # foreign_pre_chain gives records from uvicorn the same timestamp/level keys
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
