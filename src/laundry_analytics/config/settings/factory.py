"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from laundry_analytics.config.settings.base import Settings
from laundry_analytics.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from laundry_analytics.config.validation.errors import (
    ConfigError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)


class SettingsFactory:
    """Merge outputs from multiple loaders, apply overrides, and construct
    a settings dataclass in one step.

    Loaders are applied in order; later loaders override earlier ones for
    overlapping fields.  *overrides* take the highest priority.  A loader
    that lacks a required setting is skipped so the remaining loaders may
    still contribute; a value that is present but invalid is raised.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """
        Parameters
        ----------
        settings_cls:
            The :class:`Settings` subclass to construct.
        loaders:
            Ordered loaders; defaults to a single :class:`EnvSettingsLoader`.
        overrides:
            Explicit key-value pairs applied after all loaders, useful for
            tests and local development.

        Raises
        ------
        MissingRequiredSettingError
            When a required field is absent after all sources are merged.
        InvalidSettingValueError
            When a loader finds a value that cannot be coerced or validated.
        ConfigError
            When construction or cross-field validation fails.
        """
        merged: dict[str, Any] = {}

        for loader in loaders if loaders is not None else [EnvSettingsLoader()]:
            try:
                instance = loader.load(settings_cls)
            except MissingRequiredSettingError:
                continue
            for field in dataclasses.fields(instance):  # type: ignore[arg-type]
                merged[field.name] = getattr(instance, field.name)

        if overrides:
            merged.update(overrides)

        for field in dataclasses.fields(settings_cls):  # type: ignore[arg-type]
            if field.name in merged:
                continue
            if (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
            ):
                raise MissingRequiredSettingError(field.name)

        try:
            return settings_cls(**merged)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to construct {settings_cls.__name__}: {exc}") from exc


__all__ = ["SettingsFactory"]
