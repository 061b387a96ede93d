"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from mp_access.kernel.security.security_context import SecurityContext


class SubjectProcessor:
    """structlog processor that injects ``subject_id`` from :class:`SecurityContext`.

    The id is taken from ``subject.id`` when present, otherwise ``str(subject)``.
    Nothing is added for anonymous requests.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        subject = SecurityContext.get_current()
        if subject is not None:
            event_dict.setdefault("subject_id", getattr(subject, "id", None) or str(subject))
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, optionally bound to *initial_values*."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["SubjectProcessor", "get_logger"]
