"""Config – AccessSettings."""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import ClassVar

from mp_access.config.errors import InvalidSettingValueError
from mp_access.config.loader import EnvSettingsLoader

_RESULT_SHAPES = frozenset({"boolean", "detail", "array", "both"})


@dataclasses.dataclass(frozen=True)
class AccessSettings:
    """Tunables for policy evaluation and guard compilation.

    Loaded from ``ACCESS_*`` environment variables::

        settings = AccessSettings.from_env()

    Parameters
    ----------
    fingerprint_length:
        Number of hex characters of the route-pattern hash appended to guard
        names.
    default_require_all:
        ``require_all`` used by ``ability`` when the caller passes no options.
    default_result_shape:
        ``result_shape`` used by ``ability`` when the caller passes no options.
    audit_denials:
        Emit an ``audit.access`` entry every time a guard denies a request.
    log_level:
        Level name handed to :func:`~mp_access.observability.logging.configure_logging`.
    """

    env_prefix: ClassVar[str] = "ACCESS"

    fingerprint_length: int = 6
    default_require_all: bool = True
    default_result_shape: str = "boolean"
    audit_denials: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 1 <= self.fingerprint_length <= 32:
            raise InvalidSettingValueError(
                "fingerprint_length", self.fingerprint_length, "must be between 1 and 32"
            )
        if self.default_result_shape.lower() not in _RESULT_SHAPES:
            raise InvalidSettingValueError(
                "default_result_shape",
                self.default_result_shape,
                f"must be one of {sorted(_RESULT_SHAPES)}",
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AccessSettings:
        return EnvSettingsLoader(environ).load(cls)

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())


__all__ = ["AccessSettings"]
