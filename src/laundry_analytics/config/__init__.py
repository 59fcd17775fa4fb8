"""Config – 12-factor settings for the bus, sink and warehouse."""

from laundry_analytics.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    EventBusSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
    SinkSettings,
    WarehouseSettings,
)
from laundry_analytics.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "EventBusSettings",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "SinkSettings",
    "WarehouseSettings",
]
