"""Observability – DecisionAuditLogger.

A dedicated structured-log sink for access decisions.
"""
from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from mp_access.observability.logging.processors import get_logger


class AuditOutcome(str, Enum):
    """Standardised audit outcomes."""

    ALLOWED = "allowed"
    DENIED = "denied"
    FALLBACK = "fallback"


class DecisionAuditLogger:
    """Emit one ``audit.access`` entry per access decision.

    All audit entries are emitted at ``WARNING`` level so they pass through
    even restrictive log-level filters.

    Parameters
    ----------
    service:
        Logical service name injected into every audit entry.
    logger:
        Underlying structlog-compatible logger.  Defaults to
        ``get_logger("audit")``.
    """

    def __init__(self, service: str = "unknown", logger: Any = None) -> None:
        self._service = service
        self._log = logger if logger is not None else get_logger("audit")

    def log_decision(
        self,
        subject: Any,
        resource: str,
        guard: str,
        outcome: AuditOutcome | str,
        **extra: Any,
    ) -> None:
        """Record an access decision.

        Parameters
        ----------
        subject:
            The subject the decision was made for, or ``None`` for anonymous
            requests.  Uses ``subject.id`` if available, otherwise ``str(subject)``.
        resource:
            Route pattern or resource label the decision applies to.
        guard:
            Registration name of the deciding guard.
        outcome:
            :class:`AuditOutcome` or plain string.
        """
        subject_id = None
        if subject is not None:
            subject_id = getattr(subject, "id", None) or str(subject)
        self._log.warning(
            "audit.access",
            service=self._service,
            subject_id=subject_id,
            resource=resource,
            guard=guard,
            outcome=outcome.value if isinstance(outcome, AuditOutcome) else str(outcome),
            timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
            **extra,
        )


__all__ = ["AuditOutcome", "DecisionAuditLogger"]
