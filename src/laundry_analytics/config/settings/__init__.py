"""Config settings – env-based configuration."""
from laundry_analytics.config.settings.base import Settings
from laundry_analytics.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from laundry_analytics.config.settings.factory import SettingsFactory
from laundry_analytics.config.settings.pipeline import EventBusSettings, SinkSettings, WarehouseSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "EventBusSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "SinkSettings",
    "WarehouseSettings",
]
