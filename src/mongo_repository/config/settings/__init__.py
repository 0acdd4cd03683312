"""Config settings – 12-factor env-based configuration."""
from mongo_repository.config.settings.base import Settings
from mongo_repository.config.settings.factory import SettingsFactory
from mongo_repository.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mongo_repository.config.settings.mongo import MongoSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "MongoSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
