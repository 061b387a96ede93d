"""Domain errors: malformed policies, options and guard definitions."""

from __future__ import annotations

from typing import Any

from mp_access.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when an authorization rule cannot be expressed or evaluated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Caller input does not describe a valid policy."""

    default_code = "validation_error"


class InvalidArgumentError(ValidationError):
    """A caller passed a malformed argument to ``ability`` or a guard compiler.

    ``argument`` names the offending parameter (``"result_shape"``,
    ``"permission_params"``, ...).  Both it and ``repr(value)`` land in
    ``detail``.
    """

    default_code = "invalid_argument"

    def __init__(
        self,
        argument: str,
        message: str,
        *,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, argument=argument, value=repr(value), **kwargs)
        self.argument = argument
        self.value = value


__all__ = ["DomainError", "InvalidArgumentError", "ValidationError"]
