"""Guards – the compiled Guard and its registration name.

A :class:`Guard` captures an immutable policy (route pattern, role names,
permission names, cumulative flag, fallback) and decides, each time it is
called, whether the current subject may proceed.

Decision rule, with ``checks`` the role results followed by the permission
results::

    deny = False in checks and (cumulative or len(set(checks)) == 1)

With ``cumulative=True`` any failed check denies.  With ``cumulative=False``
only a unanimous failure denies; a mix of passed and failed checks lets the
request through.  An empty ``checks`` never denies.
"""
from __future__ import annotations

import hashlib
import inspect
from collections.abc import Iterable
from enum import Enum
from typing import Any

from mp_access.application.authorization.predicates import can, has_role
from mp_access.application.guards.outcome import Outcome
from mp_access.kernel.security.subject import SubjectResolver
from mp_access.observability.logging import AuditOutcome, DecisionAuditLogger, get_logger

logger = get_logger(__name__)


class GuardKind(str, Enum):
    ROLE = "role"
    PERMISSION = "permission"
    COMBINED = "combined"


class GuardState(str, Enum):
    UNEVALUATED = "unevaluated"
    ACTIVE = "active"


def guard_name(
    pattern: str,
    roles: Iterable[str] = (),
    permissions: Iterable[str] = (),
    *,
    length: int = 6,
) -> str:
    """Return the registration name for a guard.

    Role names, then permission names, then the first *length* hex chars of
    the MD5 of *pattern*, joined with ``_``.  Names are sorted so the result
    only depends on which names are present.

    Example::

        guard_name("admin/*", ["editor", "admin"])  # "admin_editor_" + 6 hex chars
    """
    digest = hashlib.md5(pattern.encode("utf-8"), usedforsecurity=False).hexdigest()
    parts = ["_".join(sorted(roles)), "_".join(sorted(permissions))]
    return "_".join([part for part in parts if part] + [digest[:length]])


def denies(checks: tuple[bool, ...], cumulative: bool) -> bool:
    """Apply the guard deny rule to *checks*."""
    return False in checks and (cumulative or len(set(checks)) == 1)


class Guard:
    """Named, zero-argument decision unit bound to a route pattern.

    Calling the guard resolves the subject, runs the role and permission
    predicates and returns an :class:`Outcome`.  A function *fallback* is
    invoked on every denial to build the fallback value; any other non-``None``
    fallback, callable objects such as ASGI responses included, is returned
    as is.
    """

    __slots__ = (
        "_audit",
        "_resolver",
        "_state",
        "cumulative",
        "fallback",
        "kind",
        "name",
        "pattern",
        "permissions",
        "roles",
    )

    def __init__(
        self,
        *,
        name: str,
        pattern: str,
        kind: GuardKind,
        roles: tuple[str, ...],
        permissions: tuple[str, ...],
        resolver: SubjectResolver,
        cumulative: bool,
        fallback: Any = None,
        audit: DecisionAuditLogger | None = None,
    ) -> None:
        self.name = name
        self.pattern = pattern
        self.kind = kind
        self.roles = roles
        self.permissions = permissions
        self.cumulative = cumulative
        self.fallback = fallback
        self._resolver = resolver
        self._audit = audit
        self._state = GuardState.UNEVALUATED

    @property
    def state(self) -> GuardState:
        return self._state

    def activate(self) -> None:
        """Mark the guard as registered with a dispatcher."""
        self._state = GuardState.ACTIVE

    def checks(self, subject: Any) -> tuple[bool, ...]:
        """Role results followed by permission results for *subject*."""
        role_results = tuple(has_role(subject, role) for role in self.roles)
        permission_results = tuple(can(subject, perm) for perm in self.permissions)
        return role_results + permission_results

    def __call__(self) -> Outcome:
        subject = self._resolver.current()
        checks = self.checks(subject)
        if not denies(checks, self.cumulative):
            logger.debug("guard.allowed", guard=self.name, pattern=self.pattern)
            return Outcome.allow()

        if self.fallback is None:
            outcome = Outcome.forbidden()
        else:
            value = self.fallback() if inspect.isroutine(self.fallback) else self.fallback
            outcome = Outcome.fallback(value)

        if self._audit is not None:
            self._audit.log_decision(
                subject,
                self.pattern,
                self.name,
                AuditOutcome.FALLBACK if self.fallback is not None else AuditOutcome.DENIED,
                kind=self.kind.value,
                roles=list(self.roles),
                permissions=list(self.permissions),
                checks=list(checks),
                cumulative=self.cumulative,
            )
        return outcome

    def same_policy(self, other: Guard) -> bool:
        """Return ``True`` if *other* guards the same pattern with the same checks.

        Fallback and ``cumulative`` may differ: recompiling with new ones
        replaces the guard.
        """
        return (
            self.pattern == other.pattern
            and self.kind is other.kind
            and set(self.roles) == set(other.roles)
            and set(self.permissions) == set(other.permissions)
        )

    def _key(self) -> tuple[Any, ...]:
        return (self.name, self.kind, self.roles, self.permissions, self.cumulative)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Guard):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"Guard(name={self.name!r}, pattern={self.pattern!r}, kind={self.kind.value!r}, "
            f"cumulative={self.cumulative!r}, state={self._state.value!r})"
        )


__all__ = ["Guard", "GuardKind", "GuardState", "denies", "guard_name"]
