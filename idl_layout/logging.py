from __future__ import annotations

"""
Structured logging for idl_layout.

This module configures **structlog** + the stdlib ``logging`` package so that
library events (type compilation, resolution failures, coder lookups) come out
as structured JSON by default, or through a pretty console renderer.

The library itself never configures logging on import; applications call
``setup_logging()`` once. Until then, events go through structlog's defaults.

Quick start
-----------
    from idl_layout.logging import setup_logging, get_logger

    setup_logging()  # level/format from IDL_LAYOUT_LOG_LEVEL / IDL_LAYOUT_LOG_FORMAT
    log = get_logger(__name__)
    log.debug("layout_compiled", type="Vault")
"""

import logging
from typing import Any, Dict, Iterable, Optional

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import JSONRenderer

from .config import get_settings


def _base_processors(include_stacktrace: bool) -> Iterable:
    yield structlog.stdlib.add_log_level
    yield structlog.processors.TimeStamper(fmt="iso", utc=True)
    yield merge_contextvars
    yield structlog.processors.StackInfoRenderer()
    if include_stacktrace:
        yield structlog.processors.format_exc_info
    yield structlog.processors.UnicodeDecoder()

    def _ensure_component(_: logging.Logger, __: str, ev: Dict[str, Any]) -> Dict[str, Any]:
        ev.setdefault("component", "idl_layout")
        return ev

    yield _ensure_component


def setup_logging(
    *,
    level: Optional[str | int] = None,
    log_format: Optional[str] = None,
    include_stacktrace: Optional[bool] = None,
) -> None:
    """
    Configure structlog + stdlib logging. Safe to call more than once.

    Parameters
    ----------
    level: str|int
        Log level (e.g., "DEBUG"). Defaults to settings.log_level.
    log_format: str
        "json" or "console". Defaults to settings.log_format.
    include_stacktrace: bool
        Render exc_info into the event. Defaults to True for JSON, False for console.
    """
    settings = get_settings()
    level = level or settings.log_level
    log_format = (log_format or settings.log_format).lower()
    if include_stacktrace is None:
        include_stacktrace = log_format == "json"

    processors = list(_base_processors(include_stacktrace))

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)
    else:
        renderer = JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                *processors,
            ],
        )
    )

    pkg = logging.getLogger("idl_layout")
    pkg.setLevel(level)
    for h in list(pkg.handlers):
        pkg.removeHandler(h)
    pkg.addHandler(handler)
    pkg.propagate = False


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structlog logger over the stdlib logger `name`.

    Levels are filtered by stdlib logging, so DEBUG events stay silent until
    the application lowers the level (e.g. via ``setup_logging``).
    """
    return structlog.wrap_logger(
        logging.getLogger(name or "idl_layout"),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


__all__ = ["setup_logging", "get_logger"]
