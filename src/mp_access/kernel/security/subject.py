"""Kernel security – Subject and SubjectResolver ports.

The evaluation core never resolves identity itself; it asks a
:class:`SubjectResolver` for the current :class:`Subject` and delegates role
and permission questions to it.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mp_access.kernel.security.security_context import SecurityContext


@runtime_checkable
class Subject(Protocol):
    """Port: the authenticated entity being authorized."""

    def has_role(self, name: str) -> bool: ...

    def has_permission(self, name: str, params: Any = None) -> bool: ...


class SubjectResolver(Protocol):
    """Port: supply the current subject or ``None``."""

    def current(self) -> Subject | None: ...


class ContextSubjectResolver:
    """Resolve the subject stored in :class:`SecurityContext`."""

    def current(self) -> Subject | None:
        return SecurityContext.get_current()


class StaticSubjectResolver:
    """Always resolve the same subject (``None`` for anonymous).

    Handy for background jobs and unit tests.
    """

    def __init__(self, subject: Subject | None = None) -> None:
        self._subject = subject

    def current(self) -> Subject | None:
        return self._subject


__all__ = ["ContextSubjectResolver", "StaticSubjectResolver", "Subject", "SubjectResolver"]
