"""Config – EnvSettingsLoader.

Builds a settings dataclass from ``<PREFIX>_<FIELD>`` environment variables.
The prefix is the class's ``env_prefix`` ClassVar; fields annotated ``bool``
or ``int`` are coerced, everything else is passed through as a string.
"""
from __future__ import annotations

import dataclasses
import os
import typing
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from mp_access.config.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T")

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def _as_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise InvalidSettingValueError(key, raw, "expected a boolean")


def _as_int(key: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidSettingValueError(key, raw, "expected an integer") from exc


def _as_str(key: str, raw: str) -> str:  # noqa: ARG001
    return raw


_COERCERS: dict[Any, Callable[[str, str], Any]] = {bool: _as_bool, int: _as_int}


class EnvSettingsLoader:
    """Load a settings dataclass from environment variables.

    Pass *environ* to read from a mapping other than :data:`os.environ`.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    @staticmethod
    def key_for(prefix: str, field_name: str) -> str:
        """``key_for("ACCESS", "log_level") == "ACCESS_LOG_LEVEL"``."""
        return "_".join(part for part in (prefix, field_name) if part).upper()

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        prefix = getattr(settings_class, "env_prefix", "")
        hints = typing.get_type_hints(settings_class)

        values: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = self.key_for(prefix, field.name)
            if key in environ:
                coerce = _COERCERS.get(hints.get(field.name), _as_str)
                values[field.name] = coerce(key, environ[key])
            elif (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING
            ):
                raise MissingRequiredSettingError(key)

        try:
            return settings_class(**values)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"cannot build {settings_class.__name__}: {exc}", cause=exc
            ) from exc


__all__ = ["EnvSettingsLoader"]
