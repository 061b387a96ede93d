"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    │       └── InvalidArgumentError
    └── ApplicationError     (application.py)
        ├── UnauthorizedError
        └── ForbiddenError

A denied guard is not an error: it yields an
:class:`~mp_access.application.guards.outcome.Outcome`.
"""

from mp_access.kernel.errors.application import (
    ApplicationError,
    ForbiddenError,
    UnauthorizedError,
)
from mp_access.kernel.errors.base import BaseError
from mp_access.kernel.errors.domain import (
    DomainError,
    InvalidArgumentError,
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
