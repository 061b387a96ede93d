"""Observability – structlog configuration, processors and audit sink."""
from mp_access.observability.logging.audit import AuditOutcome, DecisionAuditLogger
from mp_access.observability.logging.factory import configure_logging
from mp_access.observability.logging.processors import SubjectProcessor, get_logger

__all__ = [
    "AuditOutcome",
    "DecisionAuditLogger",
    "SubjectProcessor",
    "configure_logging",
    "get_logger",
]
