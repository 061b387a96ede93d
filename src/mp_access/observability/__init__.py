"""Observability – structured logging and decision auditing."""

from mp_access.observability.logging import (
    AuditOutcome,
    DecisionAuditLogger,
    SubjectProcessor,
    configure_logging,
    get_logger,
)

__all__ = [
    "AuditOutcome",
    "DecisionAuditLogger",
    "SubjectProcessor",
    "configure_logging",
    "get_logger",
]
