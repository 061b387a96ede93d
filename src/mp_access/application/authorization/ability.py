"""Authorization – the ``ability`` policy evaluator.

``ability`` checks several roles and permissions at once and combines them
either with *require all* (logical AND) or *require any* (logical OR)::

    ability(user, "admin,owner", ["posts:edit"], {"require_all": False})
    ability(user, ["admin"], ["posts:edit"],
            EvaluationOptions(result_shape=ResultShape.BOTH))
    # -> (False, AbilityDetail(roles=(True,), permissions=(False,)))

An empty policy is vacuously satisfied under *require all* and unsatisfied
under *require any*.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, NamedTuple, Union

from mp_access.application.authorization.predicates import can, has_role
from mp_access.kernel.errors import InvalidArgumentError
from mp_access.kernel.security.names import (
    NO_PARAMS,
    NameSpec,
    PermissionSpec,
    normalize_names,
    normalize_permissions,
)
from mp_access.kernel.security.subject import Subject


class ResultShape(str, Enum):
    """What :func:`ability` returns."""

    BOOLEAN = "boolean"
    DETAIL = "detail"
    BOTH = "both"

    @classmethod
    def _missing_(cls, value: object) -> ResultShape | None:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "array":
                return cls.DETAIL
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class AbilityDetail(NamedTuple):
    """Per-check results, in the order the names were given."""

    roles: tuple[bool, ...]
    permissions: tuple[bool, ...]


AbilityResult = Union[bool, AbilityDetail, tuple[bool, AbilityDetail]]

_OPTION_ALIASES = {
    "require_all": "require_all",
    "validate_all": "require_all",
    "result_shape": "result_shape",
    "return_type": "result_shape",
    "permission_params": "permission_params",
}


@dataclasses.dataclass(frozen=True)
class EvaluationOptions:
    """Options for :func:`ability`.

    Parameters
    ----------
    require_all:
        ``True`` – every check must pass; ``False`` – any single check suffices.
    result_shape:
        :class:`ResultShape` or its string value (``"array"`` is accepted as an
        alias of ``"detail"``).
    permission_params:
        Parameters handed to the permission check, keyed by permission name.
    """

    require_all: bool = True
    result_shape: ResultShape = ResultShape.BOOLEAN
    permission_params: Mapping[str, Any] = dataclasses.field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not isinstance(self.require_all, bool):
            raise InvalidArgumentError(
                "require_all", "require_all must be a boolean", value=self.require_all
            )
        try:
            shape = ResultShape(self.result_shape)
        except ValueError as exc:
            raise InvalidArgumentError(
                "result_shape",
                f"result_shape must be one of {[s.value for s in ResultShape]}",
                value=self.result_shape,
                cause=exc,
            ) from exc
        if not isinstance(self.permission_params, Mapping):
            raise InvalidArgumentError(
                "permission_params",
                "permission_params must be a mapping",
                value=self.permission_params,
            )
        object.__setattr__(self, "result_shape", shape)
        object.__setattr__(
            self, "permission_params", MappingProxyType(dict(self.permission_params))
        )

    @classmethod
    def coerce(
        cls,
        options: EvaluationOptions | Mapping[str, Any] | None,
        defaults: EvaluationOptions | None = None,
    ) -> EvaluationOptions:
        """Build options from an instance, a plain mapping or ``None``.

        Mapping keys missing from *options* fall back to *defaults*.
        """
        if isinstance(options, EvaluationOptions):
            return options
        base = defaults or cls()
        if options is None:
            return base
        if not isinstance(options, Mapping):
            raise InvalidArgumentError("options", "options must be a mapping", value=options)

        values: dict[str, Any] = {}
        for key, value in options.items():
            field = _OPTION_ALIASES.get(key)
            if field is None:
                raise InvalidArgumentError("options", f"unknown option {key!r}", value=key)
            values[field] = value
        return dataclasses.replace(base, **values)


def _bind_params(
    pairs: tuple[tuple[str, Any], ...],
    permission_params: Mapping[str, Any],
) -> list[tuple[str, Any]]:
    names = {name for name, _ in pairs}
    unknown = sorted(set(permission_params) - names)
    if unknown:
        raise InvalidArgumentError(
            "permission_params",
            f"parameters given for permissions not in the policy: {unknown}",
            value=unknown,
        )

    bound: list[tuple[str, Any]] = []
    for name, inline in pairs:
        if name in permission_params:
            if inline is not NO_PARAMS:
                raise InvalidArgumentError(
                    "permission_params",
                    f"permission {name!r} has both inline and mapped parameters",
                    value=name,
                )
            bound.append((name, permission_params[name]))
        else:
            bound.append((name, None if inline is NO_PARAMS else inline))
    return bound


def _shape(allowed: bool, detail: AbilityDetail, shape: ResultShape) -> AbilityResult:
    if shape is ResultShape.BOOLEAN:
        return allowed
    if shape is ResultShape.DETAIL:
        return detail
    return allowed, detail


def ability(
    subject: Subject | None,
    roles: NameSpec,
    permissions: PermissionSpec,
    options: EvaluationOptions | Mapping[str, Any] | None = None,
    *,
    defaults: EvaluationOptions | None = None,
) -> AbilityResult:
    """Evaluate *roles* and *permissions* for *subject*.

    Options are validated before anything else, so a malformed call fails
    even for anonymous requests.  Without a subject no predicate is called:
    the overall result is ``False`` and every detail entry is ``False``.

    Raises
    ------
    InvalidArgumentError
        On a bad ``result_shape`` / ``require_all``, or ``permission_params``
        that do not match the permissions of the policy.
    """
    opts = EvaluationOptions.coerce(options, defaults)
    role_names = normalize_names(roles, argument="roles")
    bound = _bind_params(normalize_permissions(permissions), opts.permission_params)

    if subject is None:
        detail = AbilityDetail((False,) * len(role_names), (False,) * len(bound))
        return _shape(False, detail, opts.result_shape)

    detail = AbilityDetail(
        roles=tuple(has_role(subject, name) for name in role_names),
        permissions=tuple(can(subject, name, params) for name, params in bound),
    )
    checks = detail.roles + detail.permissions
    allowed = all(checks) if opts.require_all else any(checks)
    return _shape(allowed, detail, opts.result_shape)


__all__ = [
    "AbilityDetail",
    "AbilityResult",
    "EvaluationOptions",
    "ResultShape",
    "ability",
]
