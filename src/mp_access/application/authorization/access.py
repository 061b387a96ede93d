"""Authorization – AccessControl facade and the ``@requires`` decorator.

:class:`AccessControl` binds the predicates and the policy evaluator to a
:class:`~mp_access.kernel.security.SubjectResolver`, so application code asks
"may the *current* subject ...?" without passing the subject around.

Example::

    access = AccessControl(ContextSubjectResolver())

    if access.can("posts:edit", params=post):
        ...

    @requires(access, roles="admin", permissions=["reports:read"], require_all=False)
    async def export_report() -> Report:
        ...
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Mapping
from typing import Any, Callable, TypeVar

from mp_access.application.authorization.ability import (
    AbilityResult,
    EvaluationOptions,
    ability,
)
from mp_access.application.authorization.predicates import can, has_role
from mp_access.config.access import AccessSettings
from mp_access.kernel.errors import ForbiddenError, UnauthorizedError
from mp_access.kernel.security.names import (
    NameSpec,
    PermissionSpec,
    normalize_names,
    normalize_permissions,
)
from mp_access.kernel.security.subject import Subject, SubjectResolver
from mp_access.observability.logging import get_logger

F = TypeVar("F", bound=Callable[..., Any])

logger = get_logger(__name__)


class AccessControl:
    """Role, permission and policy checks against the resolved subject.

    Parameters
    ----------
    resolver:
        Supplies the current subject (``None`` when unauthenticated).
    settings:
        Source of the default ``require_all`` / ``result_shape`` used when
        :meth:`ability` is called without options.
    """

    def __init__(
        self,
        resolver: SubjectResolver,
        settings: AccessSettings | None = None,
    ) -> None:
        self._resolver = resolver
        self._settings = settings or AccessSettings()
        self._defaults = EvaluationOptions(
            require_all=self._settings.default_require_all,
            result_shape=self._settings.default_result_shape,
        )

    @property
    def settings(self) -> AccessSettings:
        return self._settings

    @property
    def defaults(self) -> EvaluationOptions:
        return self._defaults

    def user(self) -> Subject | None:
        """Return the current subject or ``None``."""
        return self._resolver.current()

    def has_role(self, role_name: str) -> bool:
        return has_role(self.user(), role_name)

    def can(self, permission_name: str, params: Any = None) -> bool:
        return can(self.user(), permission_name, params)

    def ability(
        self,
        roles: NameSpec,
        permissions: PermissionSpec,
        options: EvaluationOptions | Mapping[str, Any] | None = None,
    ) -> AbilityResult:
        """Evaluate a composite policy for the current subject.

        See :func:`~mp_access.application.authorization.ability.ability`.
        """
        subject = self.user()
        result = ability(subject, roles, permissions, options, defaults=self._defaults)
        logger.debug(
            "access.ability",
            authenticated=subject is not None,
            roles=normalize_names(roles),
            permissions=[name for name, _ in normalize_permissions(permissions)],
            result=result,
        )
        return result


def requires(
    access: AccessControl,
    *,
    roles: NameSpec = None,
    permissions: PermissionSpec = None,
    require_all: bool = True,
    permission_params: Mapping[str, Any] | None = None,
) -> Callable[[F], F]:
    """Decorator that enforces a policy on the current subject.

    Works on both async and sync callables.  Raises :class:`UnauthorizedError`
    if no subject is resolved, and :class:`ForbiddenError` if the policy is
    not satisfied.  The options are validated when the decorator is applied.
    """
    role_names = normalize_names(roles)
    permission_pairs = normalize_permissions(permissions)
    options = EvaluationOptions(
        require_all=require_all,
        permission_params=permission_params or {},
    )
    # fail fast on params that do not match the permissions
    ability(None, role_names, permission_pairs, options)

    def check() -> None:
        subject = access.user()
        if subject is None:
            raise UnauthorizedError()
        if not ability(subject, role_names, permission_pairs, options):
            raise ForbiddenError(
                f"subject {getattr(subject, 'id', None) or subject!s} does not satisfy the policy",
                roles=role_names,
                permissions=tuple(name for name, _ in permission_pairs),
            )

    def decorator(fn: F) -> F:
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                check()
                return await fn(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(fn)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            check()
            return fn(*args, **kwargs)

        return sync_wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["AccessControl", "requires"]
