"""Config – ``ACCESS_*`` environment settings and their errors."""
from mp_access.config.access import AccessSettings
from mp_access.config.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from mp_access.config.loader import EnvSettingsLoader

__all__ = [
    "AccessSettings",
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
