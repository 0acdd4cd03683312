"""Configuration – env/dotenv-based settings for the Mongo connection."""
from mongo_repository.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    MongoSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from mongo_repository.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "MongoSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
