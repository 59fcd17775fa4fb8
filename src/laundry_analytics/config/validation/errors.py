"""Config – settings validation errors."""
from __future__ import annotations

from laundry_analytics.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Raised when pipeline configuration is invalid or cannot be loaded."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A required setting has no value in any source."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"Required setting '{setting_name}' is missing",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be used as given."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
