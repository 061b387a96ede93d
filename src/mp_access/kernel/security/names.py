"""Kernel security – role/permission name normalization.

Roles and permissions arrive either as a sequence of names or as a single
delimited string (``"admin, editor"``).  Everything is normalized here, at
the API boundary, into an ordered tuple of unique, non-empty names.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, Union

from mp_access.kernel.errors import InvalidArgumentError

_DELIMITER_RE = re.compile(r"[\s,]+")

NameSpec = Union[str, Iterable[str], None]
PermissionSpec = Union[str, Iterable[Union[str, tuple[str, Any]]], None]

# Marks a permission that carries no inline parameters.
NO_PARAMS: Any = object()


def split_names(value: str) -> list[str]:
    """Split *value* on whitespace and commas, dropping empty fragments."""
    return [part for part in _DELIMITER_RE.split(value) if part]


def normalize_names(spec: NameSpec, *, argument: str = "roles") -> tuple[str, ...]:
    """Return the ordered unique names described by *spec*.

    >>> normalize_names("admin, editor  admin")
    ('admin', 'editor')
    """
    if spec is None:
        return ()
    if isinstance(spec, str):
        raw = split_names(spec)
    else:
        raw = []
        for item in spec:
            if not isinstance(item, str):
                raise InvalidArgumentError(
                    argument, f"{argument} must contain strings", value=item
                )
            name = item.strip()
            if name:
                raw.append(name)
    return tuple(dict.fromkeys(raw))


def normalize_permissions(
    spec: PermissionSpec,
) -> tuple[tuple[str, Any], ...]:
    """Return ordered unique ``(name, params)`` pairs described by *spec*.

    Items may be plain names or ``(name, params)`` pairs.  Names without
    inline parameters are paired with :data:`NO_PARAMS`.  The first
    occurrence of a name wins.
    """
    if spec is None:
        return ()
    if isinstance(spec, str):
        return tuple((name, NO_PARAMS) for name in dict.fromkeys(split_names(spec)))

    pairs: dict[str, Any] = {}
    for item in spec:
        if isinstance(item, str):
            name, params = item.strip(), NO_PARAMS
        elif isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str):
            name, params = item[0].strip(), item[1]
        else:
            raise InvalidArgumentError(
                "permissions",
                "permissions must contain names or (name, params) pairs",
                value=item,
            )
        if name and name not in pairs:
            pairs[name] = params
    return tuple(pairs.items())


__all__ = [
    "NO_PARAMS",
    "NameSpec",
    "PermissionSpec",
    "normalize_names",
    "normalize_permissions",
    "split_names",
]
