"""Authorization – role and permission predicates.

Both predicates answer ``False`` for an anonymous request and otherwise
delegate to the subject.  Any per-permission custom logic belongs to the
subject (see :attr:`Principal.permission_checks`).
"""
from __future__ import annotations

from typing import Any

from mp_access.kernel.security.subject import Subject


def has_role(subject: Subject | None, role_name: str) -> bool:
    """Return ``True`` if *subject* holds the role named *role_name*."""
    if subject is None:
        return False
    return bool(subject.has_role(role_name))


def can(subject: Subject | None, permission_name: str, params: Any = None) -> bool:
    """Return ``True`` if *subject* is permitted *permission_name* given *params*."""
    if subject is None:
        return False
    return bool(subject.has_permission(permission_name, params))


__all__ = ["can", "has_role"]
