"""
Structured logging for the scheduling engine (structlog over stdlib).

The engine runs inside the orchestrator's request handler, so it never
configures logging on import. The host (or the debug CLI) calls
setup_logging() once; every module just asks for get_logger(__name__).
Log lines go to stderr by default because the CLI owns stdout for JSON.

Environment:
    CADENCE_LOG_LEVEL   DEBUG shows per-block scoring detail (default INFO)
    CADENCE_LOG_FORMAT  "json" for one JSON object per line, else console

Usage:
    from cadence.logging_config import setup_logging, user_context
    setup_logging()

    with user_context("alice"):
        engine.record_explicit_log("alice", 4)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

# Third-party loggers that would otherwise echo every backend call at DEBUG
QUIET_LOGGERS = ("redis",)


def resolve_level(level: str | None = None) -> int:
    """Numeric level from an explicit name or CADENCE_LOG_LEVEL; unknown names mean INFO."""
    name = level or os.environ.get("CADENCE_LOG_LEVEL") or "INFO"
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def _wants_json(json_output: bool | None) -> bool:
    if json_output is not None:
        return json_output
    return os.environ.get("CADENCE_LOG_FORMAT", "").lower() == "json"


def _final_processors(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        # Tracebacks as structured data, one record per event
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer()]


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler.

    Args:
        level: Level name; falls back to CADENCE_LOG_LEVEL, then INFO
        json_output: Force JSON (True) or console (False) rendering
        stream: Destination (default: stderr)
    """
    numeric_level = resolve_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_final_processors(_wants_json(json_output)),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def user_context(user_id: str):
    """Bind ``user_id`` to every log line emitted inside the ``with`` block."""
    return structlog.contextvars.bound_contextvars(user_id=user_id)


__all__ = ["get_logger", "resolve_level", "setup_logging", "user_context"]
