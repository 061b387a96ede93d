"""Kernel – framework-agnostic errors and security primitives."""

from mp_access.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    ForbiddenError,
    InvalidArgumentError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "ForbiddenError",
    "InvalidArgumentError",
    "UnauthorizedError",
    "ValidationError",
]
