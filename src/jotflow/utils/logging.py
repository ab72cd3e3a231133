"""
Jotflow Structured Logging

structlog events are rendered through stdlib handlers, so one setup call
routes pipeline and third-party logs alike: to stderr (JSON or console)
and, optionally, to a JSON log file. stdout is left to CLI output.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Literal

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger

QUIET_LOGGERS = ("asyncio", "httpx", "httpcore", "anthropic", "openai", "sqlalchemy.engine")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = "jotflow"
    return event_dict


def _handler(
    handler: logging.Handler,
    renderers: list[Any],
    pre_chain: list[Any],
) -> logging.Handler:
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )
    return handler


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console"] = "json",
    log_file: Path | None = None,
) -> None:
    """
    Configure structured logging for Jotflow.

    Args:
        level: Minimum log level to output
        format: stderr format - 'json' for production, 'console' for development
        log_file: Optional file that receives every event as JSON
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]
    json_renderers = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    if format == "json":
        stderr_renderers = json_renderers
    else:
        stderr_renderers = [
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Replace only our own handlers so repeated setup does not duplicate output
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, "_jotflow", False)]:
        root.removeHandler(existing)
        existing.close()

    handlers = [_handler(logging.StreamHandler(sys.stderr), stderr_renderers, shared_processors)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_handler(logging.FileHandler(log_file), json_renderers, shared_processors))
    for handler in handlers:
        handler._jotflow = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a logger, usually with ``__name__`` of the calling module."""
    return structlog.get_logger(name)
