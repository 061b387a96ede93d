"""Kernel security – SecurityContext using contextvars."""

from __future__ import annotations

import contextvars
from typing import Any

_VAR: contextvars.ContextVar[Any | None] = contextvars.ContextVar(
    "_security_context", default=None
)


class SecurityContext:
    """Store and retrieve the current authenticated subject via
    :mod:`contextvars` so each thread and asyncio task has its own isolated
    context."""

    @staticmethod
    def get_current() -> Any | None:
        """Return the current subject, or ``None`` if absent."""
        return _VAR.get()

    @staticmethod
    def set_current(subject: Any) -> contextvars.Token[Any | None]:
        """Set the current subject and return a reset token."""
        return _VAR.set(subject)

    @staticmethod
    def reset(token: contextvars.Token[Any | None]) -> None:
        """Restore the subject that was current before ``set_current``."""
        _VAR.reset(token)

    @staticmethod
    def clear() -> None:
        """Remove the current subject from context."""
        _VAR.set(None)

    @staticmethod
    def require() -> Any:
        """Return the current subject or raise ``UnauthorizedError``."""
        subject = _VAR.get()
        if subject is None:
            from mp_access.kernel.errors import UnauthorizedError

            raise UnauthorizedError("No authenticated subject in context")
        return subject


__all__ = ["SecurityContext"]
