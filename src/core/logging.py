from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

_CONFIGURED = False


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def service_context(app_name: str, environment: str) -> Processor:
    """Stamp every record with the service name and deployment environment."""

    def _add_service_context(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("env", environment)
        return event_dict

    return _add_service_context


def setup_logging(level: int | str | None = None, fmt: str | None = None) -> None:
    """Configure structlog once per process.

    ``level`` and ``fmt`` fall back to ``LOG_LEVEL`` and ``LOG_FORMAT``. Report
    computations log through the same pipeline as request handling, so the
    request id bound by the API middleware shows up on engine warnings too.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    from src.core.config import get_settings

    settings = get_settings()
    resolved_level = _resolve_level(level if level is not None else settings.log_level)
    fmt = (fmt or settings.log_format).lower()

    logging.basicConfig(level=resolved_level, format="%(message)s", stream=sys.stdout)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        service_context(settings.app_name, settings.environment),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    ]
    if fmt == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(resolved_level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
