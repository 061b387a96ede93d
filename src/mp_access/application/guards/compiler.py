"""Guards – GuardCompiler.

Turns a route pattern plus role and/or permission names into a registered
:class:`~mp_access.application.guards.guard.Guard`::

    compiler = GuardCompiler(ContextSubjectResolver(), dispatcher)
    compiler.compile_role_guard("admin/*", "admin,editor")
    compiler.compile_permission_guard("posts/*/edit", ["posts:edit"], fallback=redirect_home)
    compiler.compile_combined_guard("reports/*", ["auditor"], ["reports:read"])

Compiling the same inputs twice yields a guard with the same name; the
dispatcher keeps the latest registration and a single binding.  A role guard
and a permission guard over the same names and pattern share a name too, so
the second one is refused instead of replacing the first.
"""
from __future__ import annotations

import threading
from typing import Any

from mp_access.application.guards.dispatcher import Dispatcher
from mp_access.application.guards.guard import Guard, GuardKind, guard_name
from mp_access.config.access import AccessSettings
from mp_access.kernel.errors import InvalidArgumentError
from mp_access.kernel.security.names import NameSpec, normalize_names
from mp_access.kernel.security.subject import SubjectResolver
from mp_access.observability.logging import DecisionAuditLogger, get_logger

logger = get_logger(__name__)


class GuardCompiler:
    """Build guards and register them with a :class:`Dispatcher`.

    Parameters
    ----------
    resolver:
        Supplies the current subject every time a guard fires.
    dispatcher:
        Routing layer receiving ``register_guard`` / ``bind_guard_to_pattern``.
    settings:
        Fingerprint length and whether denials are audited.
    audit:
        Audit sink for denials.  An explicit sink is always used; without
        one a :class:`DecisionAuditLogger` is created when
        ``settings.audit_denials`` is on.
    """

    def __init__(
        self,
        resolver: SubjectResolver,
        dispatcher: Dispatcher,
        settings: AccessSettings | None = None,
        audit: DecisionAuditLogger | None = None,
    ) -> None:
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._settings = settings or AccessSettings()
        if audit is None and self._settings.audit_denials:
            audit = DecisionAuditLogger(service="mp-access")
        self._audit = audit
        self._guards: dict[str, Guard] = {}
        self._lock = threading.Lock()

    @property
    def guards(self) -> dict[str, Guard]:
        """Registered guards by name."""
        with self._lock:
            return dict(self._guards)

    # ------------------------------------------------------------------
    # Public compile API
    # ------------------------------------------------------------------

    def compile_role_guard(
        self,
        pattern: str,
        roles: NameSpec,
        fallback: Any = None,
        cumulative: bool = True,
    ) -> Guard:
        """Guard *pattern* with the given role(s)."""
        role_names = normalize_names(roles, argument="roles")
        if not role_names:
            raise InvalidArgumentError("roles", "a role guard needs at least one role", value=roles)
        return self.register(
            self.build(GuardKind.ROLE, pattern, role_names, (), fallback, cumulative)
        )

    def compile_permission_guard(
        self,
        pattern: str,
        permissions: NameSpec,
        fallback: Any = None,
        cumulative: bool = True,
    ) -> Guard:
        """Guard *pattern* with the given permission(s)."""
        permission_names = normalize_names(permissions, argument="permissions")
        if not permission_names:
            raise InvalidArgumentError(
                "permissions",
                "a permission guard needs at least one permission",
                value=permissions,
            )
        return self.register(
            self.build(GuardKind.PERMISSION, pattern, (), permission_names, fallback, cumulative)
        )

    def compile_combined_guard(
        self,
        pattern: str,
        roles: NameSpec,
        permissions: NameSpec,
        fallback: Any = None,
        cumulative: bool = False,
    ) -> Guard:
        """Guard *pattern* with roles and permissions together.

        Unlike the single-kind guards, ``cumulative`` defaults to ``False``.
        """
        role_names = normalize_names(roles, argument="roles")
        permission_names = normalize_names(permissions, argument="permissions")
        if not role_names and not permission_names:
            raise InvalidArgumentError(
                "roles",
                "a combined guard needs at least one role or permission",
                value=(roles, permissions),
            )
        return self.register(
            self.build(
                GuardKind.COMBINED, pattern, role_names, permission_names, fallback, cumulative
            )
        )

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def build(
        self,
        kind: GuardKind,
        pattern: str,
        roles: tuple[str, ...],
        permissions: tuple[str, ...],
        fallback: Any = None,
        cumulative: bool = True,
    ) -> Guard:
        """Create an unregistered guard."""
        if not isinstance(pattern, str) or not pattern.strip():
            raise InvalidArgumentError("pattern", "route pattern must be a non-empty string", value=pattern)
        if not isinstance(cumulative, bool):
            raise InvalidArgumentError("cumulative", "cumulative must be a boolean", value=cumulative)
        return Guard(
            name=guard_name(pattern, roles, permissions, length=self._settings.fingerprint_length),
            pattern=pattern,
            kind=kind,
            roles=roles,
            permissions=permissions,
            resolver=self._resolver,
            cumulative=cumulative,
            fallback=fallback,
            audit=self._audit,
        )

    def register(self, guard: Guard) -> Guard:
        """Register *guard* with the dispatcher and bind it to its pattern.

        Re-registering a name replaces the earlier guard only when both check
        the same kind, roles and permissions; a different policy that hashes
        to the same name is rejected.
        """
        with self._lock:
            existing = self._guards.get(guard.name)
            if existing is not None and not existing.same_policy(guard):
                raise InvalidArgumentError(
                    "name",
                    f"guard {guard.name!r} is already registered for a different "
                    f"{existing.kind.value} policy on {existing.pattern!r}",
                    value=guard.name,
                )
            replaced = existing is not None
            self._dispatcher.register_guard(guard.name, guard)
            self._dispatcher.bind_guard_to_pattern(guard.pattern, guard.name)
            guard.activate()
            self._guards[guard.name] = guard
        logger.debug(
            "guard.compiled",
            guard=guard.name,
            pattern=guard.pattern,
            kind=guard.kind.value,
            cumulative=guard.cumulative,
            replaced=replaced,
        )
        return guard


__all__ = ["GuardCompiler"]
