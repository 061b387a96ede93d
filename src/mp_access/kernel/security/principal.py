"""Kernel security – Principal, Role, Permission."""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any


def _permission_matches(stored: str, required: str) -> bool:
    """Return ``True`` if *stored* satisfies *required* permission.

    Wildcard rules:
    - ``"*"`` matches any permission.
    - ``"resource:*"`` matches any action on *resource*.
    - Exact string match also satisfies.
    """
    if stored == "*" or stored == required:
        return True
    if stored.endswith(":*"):
        return required.startswith(stored[:-1])
    return False


@dataclasses.dataclass(frozen=True)
class Permission:
    """Fine-grained permission string (e.g. 'posts:edit')."""
    value: str

    def __str__(self) -> str:
        return self.value

    def grants(self, required: str) -> bool:
        return _permission_matches(self.value, required)


@dataclasses.dataclass(frozen=True)
class Role:
    """Named role bundling a set of :class:`Permission` values.

    Example::

        editor = Role(
            "editor",
            permissions=frozenset({Permission("posts:edit"), Permission("posts:read")}),
        )
    """
    name: str
    permissions: frozenset[Permission] = frozenset()

    def __str__(self) -> str:
        return self.name

    def grants(self, required: str) -> bool:
        return any(p.grants(required) for p in self.permissions)


PermissionCheck = Callable[[Any], bool]


@dataclasses.dataclass(frozen=True)
class Principal:
    """Authenticated identity; the default :class:`~.subject.Subject`.

    A permission is held directly (``permissions``) or through any of the
    principal's ``roles``.  ``permission_checks`` overrides membership for
    individual permission names: the registered callable receives the call
    parameters and its truthiness is the answer.
    """
    subject: str
    roles: frozenset[Role] = frozenset()
    permissions: frozenset[Permission] = frozenset()
    claims: dict[str, Any] = dataclasses.field(default_factory=dict)
    permission_checks: Mapping[str, PermissionCheck] = dataclasses.field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def id(self) -> str:
        return self.subject

    def has_role(self, role: str | Role) -> bool:
        name = role.name if isinstance(role, Role) else role
        return any(r.name == name for r in self.roles)

    def has_permission(self, permission: str | Permission, params: Any = None) -> bool:
        value = permission.value if isinstance(permission, Permission) else permission
        check = self.permission_checks.get(value)
        if check is not None:
            return bool(check(params))
        if any(p.grants(value) for p in self.permissions):
            return True
        return any(r.grants(value) for r in self.roles)

    def __str__(self) -> str:
        return self.subject


__all__ = ["Permission", "PermissionCheck", "Principal", "Role"]
