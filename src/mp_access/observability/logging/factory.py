"""Observability – structlog JSON configuration."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from mp_access.observability.logging.processors import SubjectProcessor


def configure_logging(level: int | str = logging.INFO, *, json: bool = True) -> None:
    """Route structlog through the stdlib root logger.

    Every event gets the logger name, level, an ISO timestamp and the id of
    the subject in :class:`~mp_access.kernel.security.SecurityContext`.
    With ``json=False`` a console renderer is used instead (local dev).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        SubjectProcessor(),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_logging"]
