"""Config – environment-driven settings for clients and retries."""

from nap.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from nap.config.retry import BACKOFF_KINDS, RetrySettings
from nap.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader

__all__ = [
    "BACKOFF_KINDS",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RetrySettings",
    "Settings",
    "SettingsLoader",
]
