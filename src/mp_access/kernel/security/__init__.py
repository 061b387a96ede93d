"""Kernel security – Principal, Roles, Permissions, Subject ports, name normalization."""
from mp_access.kernel.security.principal import Permission, PermissionCheck, Principal, Role
from mp_access.kernel.security.security_context import SecurityContext
from mp_access.kernel.security.subject import (
    ContextSubjectResolver,
    StaticSubjectResolver,
    Subject,
    SubjectResolver,
)
from mp_access.kernel.security.names import (
    NO_PARAMS,
    NameSpec,
    PermissionSpec,
    normalize_names,
    normalize_permissions,
    split_names,
)

__all__ = [
    "ContextSubjectResolver",
    "NO_PARAMS",
    "NameSpec",
    "Permission",
    "PermissionCheck",
    "PermissionSpec",
    "Principal",
    "Role",
    "SecurityContext",
    "StaticSubjectResolver",
    "Subject",
    "SubjectResolver",
    "normalize_names",
    "normalize_permissions",
    "split_names",
]
