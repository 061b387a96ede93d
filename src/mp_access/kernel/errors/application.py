"""Application-layer errors raised by the ``requires`` decorator."""

from __future__ import annotations

from typing import Any

from mp_access.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """No subject could be resolved for the current request."""

    default_code = "unauthorized"

    def __init__(self, message: str = "No authenticated subject", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(ApplicationError):
    """Authenticated subject does not satisfy the required policy.

    The required ``roles`` and ``permissions`` are reported in ``detail``.
    """

    default_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        *,
        roles: tuple[str, ...] = (),
        permissions: tuple[str, ...] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(message, roles=roles, permissions=permissions, **kwargs)
        self.roles = roles
        self.permissions = permissions


__all__ = ["ApplicationError", "ForbiddenError", "UnauthorizedError"]
