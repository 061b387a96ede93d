"""Config errors raised while loading or validating settings.

Each error names the offending setting in ``detail`` so a misconfigured
deployment fails with the environment variable to fix.
"""
from __future__ import annotations

from mp_access.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Settings could not be built."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A setting without a default has no environment variable."""

    default_code = "missing_setting"

    def __init__(self, setting: str) -> None:
        super().__init__(f"{setting} is not set", setting=setting)
        self.setting = setting


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be used."""

    default_code = "invalid_setting"

    def __init__(self, setting: str, value: object, reason: str) -> None:
        super().__init__(
            f"{setting}={value!r}: {reason}", setting=setting, value=repr(value), reason=reason
        )
        self.setting = setting
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
