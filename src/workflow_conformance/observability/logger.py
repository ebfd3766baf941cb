from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter


def _resolve_log_format(json_logs_default: bool) -> str:
    raw = (os.environ.get("LOG_FORMAT") or "").strip().lower()
    if raw in {"json", "human"}:
        return raw
    return "json" if json_logs_default else "human"


def _resolve_log_level(log_level_default: str) -> str:
    raw = (os.environ.get("LOG_LEVEL") or "").strip()
    if raw:
        return raw
    return log_level_default


def _coerce_log_format(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized if normalized in {"json", "human"} else None


def configure_logging(
    *,
    log_level: str = "WARNING",
    json_logs: bool = False,
    log_format: str | None = None,
) -> None:
    """
    Minimal structlog + stdlib logging configuration.

    Logs go to stderr; stdout carries the report. LOG_FORMAT=human|json can
    override `json_logs`.
    """
    resolved_level = _resolve_log_level(log_level).upper()
    configured_format = _coerce_log_format(log_format)
    resolved_format = configured_format or _resolve_log_format(json_logs)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: Any
    if resolved_format == "json":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolved_level)

    structlog.configure(
        processors=[
            *shared_processors,
            ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_library_logging() -> None:
    """Route structlog events through stdlib logging unless the caller configured structlog.

    structlog's default prints every event, debug included, to stdout. Routed
    through stdlib, events follow the host application's logging levels and
    handlers instead.
    """
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
